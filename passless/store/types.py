"""
Storage interface for Passless challenge and credential records.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

T = TypeVar('T')


class KeyValueStore(ABC, Generic[T]):
    """Abstract async key-value store holding one record type."""

    @abstractmethod
    async def get(self, key: str) -> Optional[T]:
        """
        Retrieve a record.

        Args:
            key: Record key

        Returns:
            The record, or None if absent

        Raises:
            StorageError: If the backend fails
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: T) -> None:
        """
        Store or overwrite a record.

        Raises:
            StorageError: If the backend fails
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Remove a record.

        Returns:
            bool: True if the record was deleted, False if not found
        """
        pass

    @abstractmethod
    async def values(self) -> List[T]:
        """Return every stored record."""
        pass

    async def contains(self, key: str) -> bool:
        return await self.get(key) is not None

    async def count(self) -> int:
        return len(await self.values())
