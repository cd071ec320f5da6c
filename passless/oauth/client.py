"""
HTTP transport for OAuth2 provider calls.

Wraps an ``aiohttp.ClientSession``: a form-encoded POST to token endpoints
and a bearer-authenticated GET to profile endpoints. Non-2xx answers are
raised as the error class the caller passes in, carrying status and body.
"""

import logging
from typing import Any, Dict, Optional, Type

import aiohttp

from ..errors import UpstreamHTTPError

logger = logging.getLogger(__name__)


def _is_success(status: int) -> bool:
    return 200 <= status < 300


class OAuthHTTPClient:
    """Thin async HTTP client used by the OAuth providers."""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None,
                 timeout: float = 30.0):
        """
        Initialize HTTP client.

        Args:
            session: Existing session to use. It is never closed by this client.
            timeout: Total request timeout in seconds for an owned session
        """
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this client created it."""
        if not self._owns_session:
            return
        if self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("Closed OAuth HTTP session")
        self._session = None

    async def post_form(self, url: str, data: Dict[str, str],
                        error_cls: Type[UpstreamHTTPError]) -> Dict[str, Any]:
        """POST ``data`` form-encoded and return the decoded JSON body."""
        headers = {'Content-Type': 'application/x-www-form-urlencoded'}
        async with self.session.post(url, data=data, headers=headers) as response:
            if not _is_success(response.status):
                body = await response.text()
                logger.warning(f"POST {url} returned {response.status}")
                raise error_cls(response.status, body, url)
            return await response.json(content_type=None)

    async def get_json(self, url: str, access_token: str,
                       error_cls: Type[UpstreamHTTPError]) -> Dict[str, Any]:
        """GET ``url`` with a bearer token and return the decoded JSON body."""
        headers = {'Authorization': f'Bearer {access_token}'}
        async with self.session.get(url, headers=headers) as response:
            if not _is_success(response.status):
                body = await response.text()
                logger.warning(f"GET {url} returned {response.status}")
                raise error_cls(response.status, body, url)
            return await response.json(content_type=None)
