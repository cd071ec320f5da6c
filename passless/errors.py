"""
Error types and error codes for Passless.
Provides structured error handling across the OAuth and passkey packages.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Standard error codes used across Passless."""
    INVALID_REQUEST = "invalid_request"
    UNSUPPORTED_PROVIDER = "unsupported_provider"
    CONFIGURATION_ERROR = "configuration_error"
    TOKEN_EXCHANGE_FAILED = "token_exchange_failed"
    PROFILE_FETCH_FAILED = "profile_fetch_failed"
    UNKNOWN_CHALLENGE = "unknown_challenge"
    UNKNOWN_CREDENTIAL = "unknown_credential"
    STORAGE_ERROR = "storage_error"
    INTERNAL_ERROR = "internal_error"

    def __str__(self) -> str:
        return self.value


class PasslessError(Exception):
    """Base exception for all Passless errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            'error': self.error_code.value,
            'message': self.message,
            'details': self.details
        }

        if self.cause:
            result['cause'] = str(self.cause)

        return result

    def __str__(self) -> str:
        return self.message


class ValidationError(PasslessError):
    """Raised when required input is missing or malformed."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.INVALID_REQUEST,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details)
        self.field = field

        if field:
            self.details['field'] = field


class UnsupportedProviderError(ValidationError):
    """Raised for an OAuth provider name that is not registered."""

    def __init__(self, provider: Any, supported: Optional[list] = None):
        supported = supported or ['google', 'yandex']
        names = ' or '.join(f'"{name}"' for name in supported)
        super().__init__(
            f"Unsupported provider. Use {names}.",
            field='provider',
            error_code=ErrorCode.UNSUPPORTED_PROVIDER,
            details={'provider': str(provider), 'supported': list(supported)}
        )
        self.provider = provider


class ConfigurationError(PasslessError):
    """Raised when an operation needs configuration that is not set."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)
        self.config_key = config_key

        if config_key:
            self.details['config_key'] = config_key


class UpstreamHTTPError(PasslessError):
    """Raised when a provider endpoint answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status: int,
        body: str = "",
        url: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    ):
        super().__init__(message, error_code, {'status': status, 'body': body})
        self.status = status
        self.body = body
        self.url = url

        if url:
            self.details['url'] = url


class TokenExchangeError(UpstreamHTTPError):
    """The token endpoint rejected the authorization code."""

    def __init__(self, status: int, body: str = "", url: Optional[str] = None):
        super().__init__(
            f"Token exchange failed ({status}): {body}",
            status, body, url, ErrorCode.TOKEN_EXCHANGE_FAILED
        )


class ProfileFetchError(UpstreamHTTPError):
    """The profile endpoint rejected the access token."""

    def __init__(self, status: int, body: str = "", url: Optional[str] = None):
        super().__init__(
            f"Profile fetch failed ({status}): {body}",
            status, body, url, ErrorCode.PROFILE_FETCH_FAILED
        )


class StateError(PasslessError):
    """Raised when a stored record needed by an operation is absent."""
    pass


class UnknownChallengeError(StateError):
    """No stored record exists for the challenge being verified."""

    def __init__(self, ceremony: str = "registration", challenge: Optional[str] = None):
        super().__init__(
            f"Unknown or expired {ceremony} challenge.",
            ErrorCode.UNKNOWN_CHALLENGE,
            {'ceremony': ceremony}
        )
        self.ceremony = ceremony
        self.challenge = challenge


class UnknownCredentialError(StateError):
    """The credential named by an assertion was never registered."""

    def __init__(self, credential_id: Optional[str] = None):
        super().__init__(
            "Unknown credential.",
            ErrorCode.UNKNOWN_CREDENTIAL,
            {'credential_id': credential_id} if credential_id else None
        )
        self.credential_id = credential_id


class StorageError(PasslessError):
    """Raised by store backends when an operation cannot complete."""

    def __init__(self, operation: str, key: str = "", message: str = "",
                 cause: Optional[Exception] = None):
        super().__init__(
            f"Storage error in {operation}: {message}",
            ErrorCode.STORAGE_ERROR,
            {'operation': operation, 'key': key},
            cause
        )
        self.operation = operation
        self.key = key
