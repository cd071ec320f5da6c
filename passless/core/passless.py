"""
Main Passless facade.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

Routes OAuth calls to the provider registered under the given name and
passkey calls to the PasskeyManager. Holds no logic of its own beyond
merging configuration.
"""

import logging
from typing import Any, Dict, Optional, Union

import aiohttp
from webauthn.helpers.structs import (
    PublicKeyCredentialCreationOptions,
    PublicKeyCredentialRequestOptions,
)

from .config import Config
from ..errors import ConfigurationError
from ..oauth.client import OAuthHTTPClient
from ..oauth.providers import OAuthProvider, get_provider_class
from ..oauth.types import OAuthResult
from ..passkey.manager import PasskeyManager, ResponsePayload
from ..passkey.types import (
    AuthenticationVerification, ChallengeRecord, CredentialRecord, RegistrationVerification,
)
from ..store.types import KeyValueStore


class Passless:
    """
    Google / Yandex OAuth2 and passkey helper.

    Use ``Passless(...)`` or ``create_passless(...)``. Configuration sections
    given by the caller are shallow-merged over the ``PASSLESS_*``
    environment defaults.
    """

    def __init__(
        self,
        config: Union[Config, Dict[str, Any], None] = None,
        challenge_store: Optional[KeyValueStore[ChallengeRecord]] = None,
        credential_store: Optional[KeyValueStore[CredentialRecord]] = None,
        http_session: Optional[aiohttp.ClientSession] = None,
        load_env: bool = True,
    ):
        """
        Initialize Passless instance.

        Args:
            config: A Config, or a mapping of per-section overrides. A mapping
                (or None) is shallow-merged over the environment defaults;
                a Config instance is taken as complete and used unchanged,
                without reading the environment or ``load_env``.
            challenge_store: Challenge storage (defaults to in-memory)
            credential_store: Credential storage (defaults to in-memory)
            http_session: aiohttp session for provider calls; not closed by Passless
            load_env: Read ``PASSLESS_*`` variables (and ``.env``) for defaults

        Example:
            passless = Passless({"google": {"client_id": "abc", "redirect_uri": "http://localhost/cb"}})
        """
        if isinstance(config, Config):
            self.config = config
        else:
            base = Config.from_env() if load_env else Config()
            self.config = base.merge(config)

        self.passkeys = PasskeyManager(self.config.passkey, challenge_store, credential_store)
        self.http = OAuthHTTPClient(http_session, timeout=self.config.http.timeout)
        self.logger = logging.getLogger(__name__)
        self.logger.debug(
            f"Passless initialized (passkey configured: {self.config.passkey.is_complete()})"
        )

    @property
    def challenge_store(self) -> KeyValueStore[ChallengeRecord]:
        return self.passkeys.challenge_store

    @property
    def credential_store(self) -> KeyValueStore[CredentialRecord]:
        return self.passkeys.credential_store

    def provider(self, name: str) -> OAuthProvider:
        """Return the configured provider registered under ``name``."""
        provider_cls = get_provider_class(name)
        section = getattr(self.config, provider_cls.name, None)
        if section is None:
            raise ConfigurationError(f"No configuration section for provider {name}", config_key=name)
        return provider_cls(section)

    def get_auth_url(self, provider: str, state: str = "") -> str:
        """Authorization redirect URL for ``provider`` ("google" or "yandex")."""
        return self.provider(provider).get_authorization_url(state)

    async def exchange_code(self, provider: str, code: str,
                            redirect_uri: Optional[str] = None) -> OAuthResult:
        """Exchange an authorization code for a token and the user's profile."""
        return await self.provider(provider).exchange_code(self.http, code, redirect_uri)

    async def create_passkey_registration_options(
        self, user_id: str, username: str, display_name: str
    ) -> PublicKeyCredentialCreationOptions:
        return await self.passkeys.create_registration_options(user_id, username, display_name)

    async def verify_passkey_registration_response(
        self, response: ResponsePayload, expected_challenge: Union[str, bytes, None] = None
    ) -> RegistrationVerification:
        return await self.passkeys.verify_registration_response(response, expected_challenge)

    async def create_passkey_authentication_options(
        self, user_id: Optional[str] = None
    ) -> PublicKeyCredentialRequestOptions:
        return await self.passkeys.create_authentication_options(user_id)

    async def verify_passkey_authentication_response(
        self, response: ResponsePayload, expected_challenge: Union[str, bytes, None] = None
    ) -> AuthenticationVerification:
        return await self.passkeys.verify_authentication_response(response, expected_challenge)

    async def close(self) -> None:
        """Close the HTTP session if Passless created it."""
        await self.http.close()

    async def __aenter__(self) -> "Passless":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


def create_passless(config: Union[Config, Dict[str, Any], None] = None, **kwargs: Any) -> Passless:
    """Create a Passless instance; keyword arguments go to the constructor."""
    return Passless(config, **kwargs)
