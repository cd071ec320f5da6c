"""
Redis-backed record storage for Passless.

Records are stored as JSON under ``<key_prefix><key>`` so that several
application instances can share challenges and credentials.
"""

import json
import logging
from typing import Any, List, Optional, Type

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..errors import StorageError
from .types import KeyValueStore, T

logger = logging.getLogger(__name__)

KEY_NAMESPACE = "passless"


def default_key_prefix(record_type: type) -> str:
    """``ChallengeRecord`` -> ``passless:challenge:``"""
    name = record_type.__name__.lower()
    if name.endswith("record") and name != "record":
        name = name[:-len("record")]
    return f"{KEY_NAMESPACE}:{name}:"


class RedisStore(KeyValueStore[T]):
    """
    Key-value store on top of an async Redis client.

    The record type must provide ``to_dict()`` and ``from_dict()``.
    """

    def __init__(self,
                 redis_client: Any,
                 record_type: Type[T],
                 key_prefix: Optional[str] = None,
                 ttl_seconds: Optional[int] = None):
        """
        Initialize Redis store.

        Args:
            redis_client: ``redis.asyncio.Redis`` instance (``decode_responses=True``)
            record_type: Record class used to decode stored JSON
            key_prefix: Prefix for Redis keys (defaults to one per record type,
                e.g. ``passless:challenge:``)
            ttl_seconds: Optional expiry applied on every write
        """
        self.redis = redis_client
        self.record_type = record_type
        self.key_prefix = key_prefix if key_prefix is not None else default_key_prefix(record_type)
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str, record_type: Type[T], **kwargs: Any) -> "RedisStore[T]":
        """Create a store with a new client connected to ``url``."""
        client = redis.from_url(url, decode_responses=True)
        return cls(client, record_type, **kwargs)

    def _get_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _decode(self, key: str, value: Any) -> T:
        try:
            if isinstance(value, bytes):
                value = value.decode('utf-8')
            return self.record_type.from_dict(json.loads(value))
        except (ValueError, KeyError, TypeError) as e:
            raise StorageError(
                "decode", key, f"Stored value is not a valid {self.record_type.__name__}: {e!r}", e
            )

    async def get(self, key: str) -> Optional[T]:
        try:
            value = await self.redis.get(self._get_key(key))
        except RedisError as e:
            raise StorageError("get", key, str(e), e)
        if value is None:
            return None
        return self._decode(key, value)

    async def set(self, key: str, value: T) -> None:
        payload = json.dumps(value.to_dict())
        try:
            await self.redis.set(self._get_key(key), payload, ex=self.ttl_seconds)
        except RedisError as e:
            raise StorageError("set", key, str(e), e)
        logger.debug(f"Stored record {key[:12]} in Redis")

    async def delete(self, key: str) -> bool:
        try:
            removed = await self.redis.delete(self._get_key(key))
        except RedisError as e:
            raise StorageError("delete", key, str(e), e)
        return removed > 0

    async def values(self) -> List[T]:
        records = []
        try:
            async for redis_key in self.redis.scan_iter(match=f"{self.key_prefix}*"):
                value = await self.redis.get(redis_key)
                if value is not None:
                    records.append(self._decode(redis_key, value))
        except RedisError as e:
            raise StorageError("values", self.key_prefix, str(e), e)
        return records

    async def close(self) -> None:
        await self.redis.aclose()
