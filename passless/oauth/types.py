"""
OAuth2 data types for Passless.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class OAuthTokenResponse:
    """Token endpoint response."""
    access_token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = None
    id_token: Optional[str] = None
    scope: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OAuthTokenResponse':
        """Create from the JSON body returned by a token endpoint."""
        return cls(
            access_token=data.get('access_token', ''),
            token_type=data.get('token_type', 'Bearer'),
            expires_in=data.get('expires_in'),
            refresh_token=data.get('refresh_token'),
            id_token=data.get('id_token'),
            scope=data.get('scope'),
            raw=dict(data)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the token payload as received."""
        return dict(self.raw) if self.raw else {
            'access_token': self.access_token,
            'token_type': self.token_type,
            'expires_in': self.expires_in,
            'refresh_token': self.refresh_token,
            'id_token': self.id_token,
            'scope': self.scope,
        }


@dataclass
class OAuthResult:
    """Outcome of a successful code exchange."""
    token: OAuthTokenResponse
    profile: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {'token': self.token.to_dict(), 'profile': self.profile}
