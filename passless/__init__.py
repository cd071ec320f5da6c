"""
Passless Python Package

Google and Yandex OAuth2 sign-in and WebAuthn passkeys behind one facade.
"""

__version__ = "0.1.0"

from .core.config import Config, GoogleConfig, YandexConfig, PasskeyConfig, HTTPConfig
from .core.passless import Passless, create_passless
from .errors import (
    PasslessError,
    ValidationError,
    UnsupportedProviderError,
    ConfigurationError,
    UpstreamHTTPError,
    TokenExchangeError,
    ProfileFetchError,
    StateError,
    UnknownChallengeError,
    UnknownCredentialError,
    StorageError,
)

__all__ = [
    "Passless",
    "create_passless",
    "Config",
    "GoogleConfig",
    "YandexConfig",
    "PasskeyConfig",
    "HTTPConfig",
    "PasslessError",
    "ValidationError",
    "UnsupportedProviderError",
    "ConfigurationError",
    "UpstreamHTTPError",
    "TokenExchangeError",
    "ProfileFetchError",
    "StateError",
    "UnknownChallengeError",
    "UnknownCredentialError",
    "StorageError",
]
