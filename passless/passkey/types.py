"""
Passkey record and result types.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from webauthn.authentication.verify_authentication_response import VerifiedAuthentication
from webauthn.registration.verify_registration_response import VerifiedRegistration

from ..util.encoding import url_safe_decode, url_safe_encode


def get_current_time() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ChallengeRecord:
    """An issued, not yet consumed, WebAuthn challenge."""
    challenge: str
    user_id: str
    created_at: datetime = field(default_factory=get_current_time)
    ceremony: str = "registration"

    def age_seconds(self, now: Optional[datetime] = None) -> float:
        return ((now or get_current_time()) - self.created_at).total_seconds()

    def is_expired(self, ttl: Optional[float], now: Optional[datetime] = None) -> bool:
        """A record never expires when ``ttl`` is None."""
        return ttl is not None and self.age_seconds(now) > ttl

    def to_dict(self) -> Dict[str, Any]:
        return {
            'challenge': self.challenge,
            'user_id': self.user_id,
            'created_at': self.created_at.isoformat(),
            'ceremony': self.ceremony,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChallengeRecord':
        return cls(
            challenge=data['challenge'],
            user_id=data['user_id'],
            created_at=datetime.fromisoformat(data['created_at']),
            ceremony=data.get('ceremony', 'registration'),
        )


@dataclass
class CredentialRecord:
    """A registered passkey. Only ``sign_count`` changes after creation."""
    credential_id: bytes
    user_id: str
    public_key: bytes
    sign_count: int = 0
    transports: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=get_current_time)

    @property
    def key(self) -> str:
        """Store key: the base64url credential id."""
        return url_safe_encode(self.credential_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'credential_id': url_safe_encode(self.credential_id),
            'user_id': self.user_id,
            'public_key': url_safe_encode(self.public_key),
            'sign_count': self.sign_count,
            'transports': list(self.transports),
            'created_at': self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CredentialRecord':
        return cls(
            credential_id=url_safe_decode(data['credential_id']),
            user_id=data['user_id'],
            public_key=url_safe_decode(data['public_key']),
            sign_count=data.get('sign_count', 0),
            transports=data.get('transports', []),
            created_at=datetime.fromisoformat(data['created_at']) if data.get('created_at') else get_current_time(),
        )


@dataclass
class RegistrationVerification:
    """Outcome of a registration response check."""
    verified: bool
    registration_info: Optional[VerifiedRegistration] = None
    credential: Optional[CredentialRecord] = None
    error: Optional[str] = None


@dataclass
class AuthenticationVerification:
    """Outcome of an authentication response check."""
    verified: bool
    authentication_info: Optional[VerifiedAuthentication] = None
    credential: Optional[CredentialRecord] = None
    user_id: Optional[str] = None
    error: Optional[str] = None
