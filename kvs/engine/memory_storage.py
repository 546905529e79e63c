"""
MemoryStorage - dict-backed Storage with the same semantics as LMDBStorage.
"""

from kvs.interfaces.storage import Storage
from kvs.models.exceptions import KeyNotFoundError, StorageError


class MemoryStorage(Storage):
    """
    In-process key-value storage.

    Nothing is persisted. Every operation completes without yielding to
    the event loop, so each one is atomic with respect to other coroutines.
    """

    def __init__(self) -> None:
        self._data: dict[bytes, bytes] | None = {}

    def _require_open(self) -> dict[bytes, bytes]:
        if self._data is None:
            raise StorageError("storage is closed")
        return self._data

    async def get(self, key: bytes) -> bytes:
        data = self._require_open()
        try:
            return data[bytes(key)]
        except KeyError:
            raise KeyNotFoundError(key) from None

    async def set(self, key: bytes, value: bytes) -> None:
        self._require_open()[bytes(key)] = bytes(value)

    async def delete(self, key: bytes) -> None:
        data = self._require_open()
        try:
            del data[bytes(key)]
        except KeyError:
            raise KeyNotFoundError(key) from None

    def close(self) -> None:
        self._data = None

    def __len__(self) -> int:
        return len(self._require_open())
