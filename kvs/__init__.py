"""
Byte-oriented key-value store served over HTTP.

The URL path is the key and the request/response body is the value.
Storage runs on an embedded LMDB environment:
- Get(key) - read-only transaction, exact cursor seek
- Set(key, value) - read-write transaction, last write wins
- Del(key) - read-write transaction, NotFound when absent
"""

from kvs.engine import LMDBStorage, MemoryStorage
from kvs.interfaces import Storage
from kvs.models import ErrorKind, InitializationError, KeyNotFoundError, StorageError

__all__ = [
    "ErrorKind",
    "InitializationError",
    "KeyNotFoundError",
    "LMDBStorage",
    "MemoryStorage",
    "Storage",
    "StorageError",
]
