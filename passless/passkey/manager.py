"""
WebAuthn (passkey) ceremonies for Passless.

Option generation and response verification are delegated to the
``webauthn`` library. This module keeps the challenge records
(``challenge -> user``) and the credential records, consuming a challenge
only after the library has accepted the response.
"""

import json
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Union

from webauthn import (
    generate_authentication_options,
    generate_registration_options,
    verify_authentication_response,
    verify_registration_response,
)
from webauthn.helpers.exceptions import (
    InvalidAuthenticationResponse,
    InvalidJSONStructure,
    InvalidRegistrationResponse,
)
from webauthn.helpers.structs import (
    AttestationConveyancePreference,
    AuthenticatorAttachment,
    AuthenticatorSelectionCriteria,
    AuthenticatorTransport,
    PublicKeyCredentialCreationOptions,
    PublicKeyCredentialDescriptor,
    PublicKeyCredentialRequestOptions,
    UserVerificationRequirement,
)

from ..core.config import PasskeyConfig
from ..errors import (
    ConfigurationError, UnknownChallengeError, UnknownCredentialError, ValidationError,
)
from ..store.memory import MemoryStore
from ..store.types import KeyValueStore
from ..util.encoding import decode_client_data, url_safe_decode, url_safe_encode
from .types import (
    AuthenticationVerification, ChallengeRecord, CredentialRecord,
    RegistrationVerification, get_current_time,
)

logger = logging.getLogger(__name__)

ResponsePayload = Union[str, Dict[str, Any]]

_TRANSPORTS = {t.value for t in AuthenticatorTransport}


def _as_dict(response: ResponsePayload) -> Dict[str, Any]:
    if isinstance(response, str):
        try:
            response = json.loads(response)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Response is not valid JSON: {e}", field='response')
    if not isinstance(response, dict):
        raise ValidationError("Response must be a JSON object.", field='response')
    return response


def _challenge_key(challenge: Union[str, bytes, None]) -> Optional[str]:
    if isinstance(challenge, bytes):
        return url_safe_encode(challenge)
    return challenge or None


def _response_body(response: Dict[str, Any]) -> Dict[str, Any]:
    body = response.get('response') or {}
    if not isinstance(body, dict):
        raise ValidationError("Credential response must be a JSON object.", field='response')
    return body


def _response_challenge(response: Dict[str, Any]) -> Optional[str]:
    """Challenge echoed by the client: a top-level field or the clientDataJSON value."""
    if response.get('challenge'):
        return response['challenge']

    client_data = _response_body(response).get('clientDataJSON')
    if not client_data:
        return None
    if not isinstance(client_data, str):
        raise ValidationError("clientDataJSON must be a base64url string.", field='clientDataJSON')
    try:
        return decode_client_data(client_data).get('challenge')
    except ValueError as e:
        logger.warning("Could not decode clientDataJSON of passkey response")
        raise ValidationError(str(e), field='clientDataJSON') from e


def _response_transports(response: Dict[str, Any]) -> List[str]:
    transports = response.get('transports')
    if transports is None:
        transports = _response_body(response).get('transports')
    return list(transports or [])


def _descriptor(credential: CredentialRecord) -> PublicKeyCredentialDescriptor:
    return PublicKeyCredentialDescriptor(
        id=credential.credential_id,
        transports=[AuthenticatorTransport(t) for t in credential.transports if t in _TRANSPORTS] or None,
    )


class PasskeyManager:
    """
    Issues and verifies WebAuthn ceremonies for one relying party.

    A challenge moves from issued to consumed; it is deleted only when the
    library accepts the matching response, so a rejected response can be
    retried. With ``challenge_ttl`` unset, unconsumed challenges are kept
    indefinitely.
    """

    def __init__(self,
                 config: PasskeyConfig,
                 challenge_store: Optional[KeyValueStore[ChallengeRecord]] = None,
                 credential_store: Optional[KeyValueStore[CredentialRecord]] = None):
        """
        Initialize passkey manager.

        Args:
            config: Relying party configuration
            challenge_store: Challenge records keyed by base64url challenge (defaults to in-memory)
            credential_store: Credential records keyed by base64url credential id (defaults to in-memory)
        """
        self.config = config
        self.challenge_store = challenge_store if challenge_store is not None else MemoryStore()
        self.credential_store = credential_store if credential_store is not None else MemoryStore()

    def _assert_config(self) -> None:
        self.config.validate()

    def _user_verification(self) -> UserVerificationRequirement:
        try:
            return UserVerificationRequirement(self.config.user_verification)
        except ValueError:
            raise ConfigurationError(
                f"Invalid user verification requirement: {self.config.user_verification}",
                config_key="user_verification"
            ) from None

    def _authenticator_selection(self) -> AuthenticatorSelectionCriteria:
        attachment = None
        if self.config.authenticator_attachment:
            try:
                attachment = AuthenticatorAttachment(self.config.authenticator_attachment)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid authenticator attachment: {self.config.authenticator_attachment}",
                    config_key="authenticator_attachment"
                ) from None
        return AuthenticatorSelectionCriteria(
            authenticator_attachment=attachment,
            user_verification=self._user_verification(),
        )

    async def list_credentials(self, user_id: str) -> List[CredentialRecord]:
        """Return every credential registered to ``user_id``."""
        return [c for c in await self.credential_store.values() if c.user_id == user_id]

    async def _save_challenge(self, challenge: bytes, user_id: str, ceremony: str) -> ChallengeRecord:
        record = ChallengeRecord(
            challenge=url_safe_encode(challenge),
            user_id=user_id,
            ceremony=ceremony,
        )
        await self.challenge_store.set(record.challenge, record)
        logger.info(f"Issued {ceremony} challenge for user {user_id}")
        return record

    async def _load_challenge(self, challenge: Optional[str], ceremony: str) -> ChallengeRecord:
        record = await self.challenge_store.get(challenge) if challenge else None
        if record is not None and record.ceremony != ceremony:
            # left in place for the ceremony that issued it
            logger.warning(f"Rejected {record.ceremony} challenge presented for {ceremony}")
            raise UnknownChallengeError(ceremony, challenge)
        if record is not None and record.is_expired(self.config.challenge_ttl):
            await self.challenge_store.delete(challenge)
            logger.info(f"Dropped expired {ceremony} challenge for user {record.user_id}")
            record = None
        if record is None:
            logger.warning(f"Unknown or expired {ceremony} challenge")
            raise UnknownChallengeError(ceremony, challenge)
        return record

    async def purge_expired_challenges(self) -> int:
        """Delete challenges older than ``challenge_ttl``; returns how many."""
        if self.config.challenge_ttl is None:
            return 0
        now = get_current_time()
        purged = 0
        for record in await self.challenge_store.values():
            if record.is_expired(self.config.challenge_ttl, now):
                if await self.challenge_store.delete(record.challenge):
                    purged += 1
        if purged:
            logger.info(f"Purged {purged} expired passkey challenges")
        return purged

    async def create_registration_options(self, user_id: str, username: str,
                                          display_name: str) -> PublicKeyCredentialCreationOptions:
        """
        Generate creation options for a new passkey.

        The user's existing credentials are sent as the exclusion list so an
        authenticator cannot be registered twice.

        Raises:
            ConfigurationError: rp_id or origin not configured
            ValidationError: a required argument is empty
        """
        self._assert_config()
        if not user_id or not username or not display_name:
            raise ValidationError("userId, username, and displayName are required.")

        existing = await self.list_credentials(user_id)
        options = generate_registration_options(
            rp_id=self.config.rp_id,
            rp_name=self.config.rp_name,
            user_id=str(user_id).encode('utf-8'),
            user_name=str(username),
            user_display_name=str(display_name),
            attestation=AttestationConveyancePreference.NONE,
            authenticator_selection=self._authenticator_selection(),
            exclude_credentials=[_descriptor(c) for c in existing],
            timeout=self.config.timeout_ms,
        )

        await self._save_challenge(options.challenge, user_id, "registration")
        return options

    async def verify_registration_response(
        self,
        response: ResponsePayload,
        expected_challenge: Union[str, bytes, None] = None,
    ) -> RegistrationVerification:
        """
        Verify an attestation response and store the new credential.

        Raises:
            ConfigurationError: rp_id or origin not configured
            UnknownChallengeError: no stored record for the challenge, or it
                was issued for the other ceremony
            ValidationError: the response body or clientDataJSON is malformed
        """
        self._assert_config()
        payload = _as_dict(response)
        challenge = _challenge_key(expected_challenge) or _response_challenge(payload)
        record = await self._load_challenge(challenge, "registration")

        try:
            info = verify_registration_response(
                credential=payload,
                expected_challenge=url_safe_decode(challenge),
                expected_origin=self.config.origin,
                expected_rp_id=self.config.rp_id,
                require_user_verification=self.config.user_verification == "required",
            )
        except (InvalidRegistrationResponse, InvalidJSONStructure) as e:
            logger.warning(f"Passkey registration rejected for user {record.user_id}: {e}")
            return RegistrationVerification(verified=False, error=str(e))

        credential = CredentialRecord(
            credential_id=info.credential_id,
            user_id=record.user_id,
            public_key=info.credential_public_key,
            sign_count=info.sign_count,
            transports=_response_transports(payload),
        )
        await self.credential_store.set(credential.key, credential)
        await self.challenge_store.delete(challenge)
        logger.info(f"Registered passkey {credential.key[:12]} for user {record.user_id}")

        return RegistrationVerification(verified=True, registration_info=info, credential=credential)

    async def create_authentication_options(self, user_id: Optional[str] = None) -> PublicKeyCredentialRequestOptions:
        """
        Generate request options allowing the user's registered credentials.

        Without ``user_id`` the allow-list is empty (discoverable credentials).
        """
        self._assert_config()
        allowed = await self.list_credentials(user_id) if user_id else []

        options = generate_authentication_options(
            rp_id=self.config.rp_id,
            allow_credentials=[_descriptor(c) for c in allowed],
            user_verification=self._user_verification(),
            timeout=self.config.timeout_ms,
        )

        await self._save_challenge(options.challenge, user_id or "", "authentication")
        return options

    async def verify_authentication_response(
        self,
        response: ResponsePayload,
        expected_challenge: Union[str, bytes, None] = None,
    ) -> AuthenticationVerification:
        """
        Verify an assertion response and persist the new signature counter.

        Raises:
            ConfigurationError: rp_id or origin not configured
            UnknownChallengeError: no stored record for the challenge, or it
                was issued for the other ceremony
            ValidationError: the response body or clientDataJSON is malformed
            UnknownCredentialError: the asserted credential is not registered
        """
        self._assert_config()
        payload = _as_dict(response)
        challenge = _challenge_key(expected_challenge) or _response_challenge(payload)
        await self._load_challenge(challenge, "authentication")

        credential_key = payload.get('id') or payload.get('rawId')
        stored = await self.credential_store.get(credential_key) if credential_key else None
        if stored is None:
            logger.warning("Passkey assertion for unknown credential")
            raise UnknownCredentialError(credential_key)

        try:
            info = verify_authentication_response(
                credential=payload,
                expected_challenge=url_safe_decode(challenge),
                expected_origin=self.config.origin,
                expected_rp_id=self.config.rp_id,
                credential_public_key=stored.public_key,
                credential_current_sign_count=stored.sign_count,
                require_user_verification=self.config.user_verification == "required",
            )
        except (InvalidAuthenticationResponse, InvalidJSONStructure) as e:
            logger.warning(f"Passkey assertion rejected for credential {credential_key[:12]}: {e}")
            return AuthenticationVerification(verified=False, user_id=stored.user_id, error=str(e))

        updated = replace(stored, sign_count=info.new_sign_count)
        await self.credential_store.set(credential_key, updated)
        await self.challenge_store.delete(challenge)
        logger.info(f"Authenticated user {stored.user_id} with passkey {credential_key[:12]}")

        return AuthenticationVerification(
            verified=True,
            authentication_info=info,
            credential=updated,
            user_id=stored.user_id,
        )
