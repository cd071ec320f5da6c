"""
Configuration module for Passless.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

Each section (google, yandex, passkey, http) is a frozen dataclass. Defaults
come from ``PASSLESS_*`` environment variables; caller overrides are merged
per section on top of them.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..errors import ConfigurationError
from ..util.config import get_config_value, load_config_file, normalize_config_key


@dataclass(frozen=True)
class OAuthClientConfig:
    """Client registration for one OAuth provider."""
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: Optional[str] = None
    scope: Optional[str] = None

    @classmethod
    def from_env(cls, provider: str) -> "OAuthClientConfig":
        prefix = provider.upper()
        return cls(
            client_id=get_config_value(f"{prefix}_CLIENT_ID"),
            client_secret=get_config_value(f"{prefix}_CLIENT_SECRET"),
            redirect_uri=get_config_value(f"{prefix}_REDIRECT_URI"),
            scope=get_config_value(f"{prefix}_SCOPE"),
        )


@dataclass(frozen=True)
class GoogleConfig(OAuthClientConfig):
    """Google OAuth2 client configuration"""


@dataclass(frozen=True)
class YandexConfig(OAuthClientConfig):
    """Yandex OAuth2 client configuration"""


@dataclass(frozen=True)
class PasskeyConfig:
    """WebAuthn relying party configuration"""
    rp_name: str = "Passless"
    rp_id: Optional[str] = None
    origin: Optional[str] = None
    user_verification: str = "preferred"
    authenticator_attachment: Optional[str] = None
    timeout_ms: int = 60000
    # seconds; None keeps challenges until they are consumed
    challenge_ttl: Optional[float] = None

    @classmethod
    def from_env(cls) -> "PasskeyConfig":
        return cls(
            rp_name=get_config_value("RP_NAME", "Passless"),
            rp_id=get_config_value("RP_ID"),
            origin=get_config_value("ORIGIN"),
            user_verification=get_config_value("USER_VERIFICATION", "preferred"),
            authenticator_attachment=get_config_value("AUTHENTICATOR_ATTACHMENT"),
            timeout_ms=get_config_value("TIMEOUT_MS", 60000, int),
            challenge_ttl=get_config_value("CHALLENGE_TTL", None, float),
        )

    def is_complete(self) -> bool:
        return bool(self.rp_id and self.origin)

    def validate(self) -> bool:
        """Raise ConfigurationError unless rp_id and origin are set."""
        if not self.is_complete():
            raise ConfigurationError(
                "Passkey configuration is missing rpId or origin.",
                config_key="rp_id" if not self.rp_id else "origin"
            )
        return True


@dataclass(frozen=True)
class HTTPConfig:
    """HTTP client settings for provider calls"""
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "HTTPConfig":
        return cls(timeout=get_config_value("HTTP_TIMEOUT", 30.0, float))


def _merge_section(section: Any, overrides: Optional[Dict[str, Any]], name: str) -> Any:
    """Return ``section`` with the override keys replaced."""
    if not overrides:
        return section
    if not isinstance(overrides, dict):
        raise ConfigurationError(f"Config section '{name}' must be a mapping", config_key=name)

    allowed = {f.name for f in fields(section)}
    changes = {}
    for key, value in overrides.items():
        normalized = normalize_config_key(key)
        if normalized not in allowed:
            raise ConfigurationError(
                f"Unknown option '{key}' in config section '{name}'",
                config_key=f"{name}.{key}"
            )
        changes[normalized] = value
    return replace(section, **changes)


@dataclass(frozen=True)
class Config:
    """Configuration for all Passless components"""
    google: GoogleConfig = field(default_factory=GoogleConfig)
    yandex: YandexConfig = field(default_factory=YandexConfig)
    passkey: PasskeyConfig = field(default_factory=PasskeyConfig)
    http: HTTPConfig = field(default_factory=HTTPConfig)

    SECTIONS = ("google", "yandex", "passkey", "http")

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Config":
        """Create configuration from environment variables (and ``.env``)"""
        if load_env_file:
            load_dotenv()
        return cls(
            google=GoogleConfig.from_env("google"),
            yandex=YandexConfig.from_env("yandex"),
            passkey=PasskeyConfig.from_env(),
            http=HTTPConfig.from_env(),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create configuration from a plain mapping, ignoring the environment"""
        return cls().merge(data)

    @classmethod
    def from_file(cls, file_path: str) -> "Config":
        """Load configuration from a JSON or YAML file"""
        return cls.from_dict(load_config_file(file_path))

    def merge(self, overrides: Optional[Dict[str, Any]]) -> "Config":
        """Shallow per-section merge of ``overrides`` over this config."""
        if not overrides:
            return self

        unknown = set(overrides) - set(self.SECTIONS)
        if unknown:
            raise ConfigurationError(
                f"Unknown config section(s): {', '.join(sorted(unknown))}",
                config_key=sorted(unknown)[0]
            )

        return Config(**{
            name: _merge_section(getattr(self, name), overrides.get(name), name)
            for name in self.SECTIONS
        })
