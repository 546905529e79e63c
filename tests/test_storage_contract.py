"""
Behaviour every Storage implementation must share.
"""

import pytest

from kvs.engine.memory_storage import MemoryStorage
from kvs.interfaces.storage import Storage
from kvs.models.exceptions import ErrorKind, KeyNotFoundError, StorageError


class TestStorageContract:
    """Runs against LMDBStorage and MemoryStorage."""

    async def test_is_storage(self, any_storage):
        assert isinstance(any_storage, Storage)

    async def test_round_trip(self, any_storage):
        await any_storage.set(b"/key1", b"VAL1")

        assert await any_storage.get(b"/key1") == b"VAL1"

    async def test_never_written(self, any_storage):
        with pytest.raises(KeyNotFoundError):
            await any_storage.get(b"/_notfound")
        with pytest.raises(KeyNotFoundError):
            await any_storage.delete(b"/_notfound")

    async def test_last_write_wins(self, any_storage):
        await any_storage.set(b"/key", b"v1")
        await any_storage.set(b"/key", b"v2")

        assert await any_storage.get(b"/key") == b"v2"

    async def test_delete(self, any_storage):
        await any_storage.set(b"/key", b"value")
        await any_storage.delete(b"/key")

        with pytest.raises(KeyNotFoundError) as exc_info:
            await any_storage.get(b"/key")
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    async def test_keys_are_independent(self, any_storage, sample_entries):
        for key, value in sample_entries:
            await any_storage.set(key, value)

        await any_storage.delete(b"/key2")

        assert await any_storage.get(b"/key1") == b"value1"
        assert await any_storage.get(b"/key3") == b"value3"

    async def test_closed_storage_raises(self, any_storage):
        any_storage.close()

        with pytest.raises(StorageError) as exc_info:
            await any_storage.get(b"/key")
        assert exc_info.value.kind is ErrorKind.STORAGE


class TestMemoryStorage:
    """Tests specific to MemoryStorage."""

    async def test_values_are_copied(self, memory_storage):
        value = bytearray(b"value")
        await memory_storage.set(b"/key", value)
        value[0:5] = b"XXXXX"

        assert await memory_storage.get(b"/key") == b"value"

    async def test_len(self, memory_storage, sample_entries):
        for key, value in sample_entries:
            await memory_storage.set(key, value)

        assert len(memory_storage) == 3

    async def test_close_is_idempotent(self):
        db = MemoryStorage()
        db.close()
        db.close()

        with pytest.raises(StorageError):
            await db.set(b"/key", b"value")
