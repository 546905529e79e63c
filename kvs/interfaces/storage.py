"""
Storage abstract base class for key-value backends.
"""

from abc import ABC, abstractmethod


class Storage(ABC):
    """
    Capability contract consumed by the request handler.

    Keys and values are opaque, non-empty byte strings. Implementations:
    - LMDBStorage: transactional, on-disk (production)
    - MemoryStorage: dict-backed, for tests and embedding
    """

    @abstractmethod
    async def get(self, key: bytes) -> bytes:
        """
        Retrieve the value stored under a key.

        Args:
            key: The key to look up.

        Returns:
            The stored value.

        Raises:
            KeyNotFoundError: If the key does not exist.
            StorageError: On any other backend failure.
        """
        pass

    @abstractmethod
    async def set(self, key: bytes, value: bytes) -> None:
        """
        Insert or overwrite a key-value pair (last write wins).

        Args:
            key: The key to write.
            value: The value to associate with the key.

        Raises:
            StorageError: On backend failure.
        """
        pass

    @abstractmethod
    async def delete(self, key: bytes) -> None:
        """
        Remove a key.

        Args:
            key: The key to remove.

        Raises:
            KeyNotFoundError: If the key does not exist.
            StorageError: On any other backend failure.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the backend's resources. Safe to call more than once."""
        pass

    async def __aenter__(self) -> "Storage":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
