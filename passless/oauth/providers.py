"""
OAuth2 providers for Passless.

Each provider is an ``OAuthProvider`` subclass carrying its static endpoints
and building on the shared authorization-code logic. Providers are looked up
by name in a registry, so a new provider only needs a subclass and a
``register_provider`` call.
"""

import logging
from abc import ABC
from typing import Dict, List, Optional, Type
from urllib.parse import urlencode

from ..core.config import OAuthClientConfig
from ..errors import (
    ConfigurationError, ProfileFetchError, TokenExchangeError,
    UnsupportedProviderError, ValidationError,
)
from .client import OAuthHTTPClient
from .types import OAuthResult, OAuthTokenResponse

logger = logging.getLogger(__name__)


class OAuthProvider(ABC):
    """Authorization-code flow against one provider."""

    name: str = ""
    authorization_endpoint: str = ""
    token_endpoint: str = ""
    profile_endpoint: str = ""
    default_scope: str = ""

    def __init__(self, config: OAuthClientConfig):
        self.config = config

    @property
    def scope(self) -> str:
        return self.config.scope or self.default_scope

    def extra_authorization_params(self) -> Dict[str, str]:
        """Provider specific query parameters added after ``scope``."""
        return {}

    def _require(self, key: str) -> str:
        value = getattr(self.config, key)
        if not value:
            raise ConfigurationError(
                f"{self.name} OAuth configuration is missing {key}.",
                config_key=f"{self.name}.{key}"
            )
        return value

    def get_authorization_url(self, state: Optional[str] = "") -> str:
        """Build the URL the user agent is redirected to."""
        params = {
            'client_id': self._require('client_id'),
            'redirect_uri': self._require('redirect_uri'),
            'response_type': 'code',
            'scope': self.scope,
        }
        params.update(self.extra_authorization_params())
        params['state'] = state or ''

        return f"{self.authorization_endpoint}?{urlencode(params)}"

    async def exchange_code(self, http: OAuthHTTPClient, code: str,
                            redirect_uri: Optional[str] = None) -> OAuthResult:
        """Exchange an authorization code for a token, then fetch the profile."""
        if not code:
            raise ValidationError("Authorization code is required.", field='code')

        form = {
            'grant_type': 'authorization_code',
            'code': code,
            'client_id': self._require('client_id'),
            'client_secret': self._require('client_secret'),
            'redirect_uri': redirect_uri or self._require('redirect_uri'),
        }

        payload = await http.post_form(self.token_endpoint, form, TokenExchangeError)
        token = OAuthTokenResponse.from_dict(payload)
        logger.info(f"Exchanged authorization code with {self.name}")

        profile = await http.get_json(self.profile_endpoint, token.access_token,
                                      ProfileFetchError)
        return OAuthResult(token=token, profile=profile)


class GoogleProvider(OAuthProvider):
    """Google OAuth2 / OpenID Connect."""

    name = "google"
    authorization_endpoint = "https://accounts.google.com/o/oauth2/v2/auth"
    token_endpoint = "https://oauth2.googleapis.com/token"
    profile_endpoint = "https://openidconnect.googleapis.com/v1/userinfo"
    default_scope = "openid email profile"

    def extra_authorization_params(self) -> Dict[str, str]:
        # offline access + forced consent so a refresh token is always issued
        return {'access_type': 'offline', 'prompt': 'consent'}


class YandexProvider(OAuthProvider):
    """Yandex ID OAuth2."""

    name = "yandex"
    authorization_endpoint = "https://oauth.yandex.com/authorize"
    token_endpoint = "https://oauth.yandex.com/token"
    profile_endpoint = "https://login.yandex.ru/info?format=json"
    default_scope = "login:info login:email"


_PROVIDERS: Dict[str, Type[OAuthProvider]] = {}


def register_provider(provider_cls: Type[OAuthProvider]) -> Type[OAuthProvider]:
    """Register a provider class under its ``name``."""
    if not provider_cls.name:
        raise ValueError("Provider class must define a name")
    _PROVIDERS[provider_cls.name] = provider_cls
    return provider_cls


def supported_providers() -> List[str]:
    return list(_PROVIDERS)


def get_provider_class(name: str) -> Type[OAuthProvider]:
    """Look up a provider class by name."""
    try:
        return _PROVIDERS[name]
    except (KeyError, TypeError):
        raise UnsupportedProviderError(name, supported_providers()) from None


register_provider(GoogleProvider)
register_provider(YandexProvider)
