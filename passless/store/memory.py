"""
In-memory record storage for Passless.

Suitable for development, tests and single-process deployments only: all
records are lost when the process exits, and a read followed by a delete is
not atomic across concurrent callers.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .types import KeyValueStore, T

logger = logging.getLogger(__name__)


class MemoryStore(KeyValueStore[T]):
    """
    Dictionary backed store.

    Each single operation is guarded by an ``asyncio.Lock``.
    """

    def __init__(self, initial: Optional[Iterable[Tuple[str, T]]] = None):
        self._store: Dict[str, T] = dict(initial or ())
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[T]:
        async with self._lock:
            return self._store.get(key)

    async def set(self, key: str, value: T) -> None:
        async with self._lock:
            self._store[key] = value
            logger.debug(f"Stored record {key[:12]}")

    async def delete(self, key: str) -> bool:
        async with self._lock:
            if key in self._store:
                del self._store[key]
                logger.debug(f"Deleted record {key[:12]}")
                return True
            return False

    async def values(self) -> List[T]:
        async with self._lock:
            return list(self._store.values())

    async def keys(self) -> List[str]:
        async with self._lock:
            return list(self._store)

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store
