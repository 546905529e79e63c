"""
Data models for the key-value store.
"""

from kvs.models.exceptions import (
    ErrorKind,
    InitializationError,
    KeyNotFoundError,
    StorageError,
)

__all__ = [
    "ErrorKind",
    "InitializationError",
    "KeyNotFoundError",
    "StorageError",
]
