"""
Error mapping - normalize LMDB failures into the storage error taxonomy.
"""

import lmdb

from kvs.models.exceptions import KeyNotFoundError, StorageError


def classify_error(exc: BaseException, key: bytes | None = None) -> StorageError:
    """
    Map an engine exception to a StorageError.

    MDB_NOTFOUND can surface from opening a keyspace, positioning a cursor
    or deleting a key; all of them become KeyNotFoundError. Every other
    failure becomes an opaque StorageError carrying the engine's message.

    Args:
        exc: The exception raised while talking to the engine.
        key: The key involved in the operation, if any.

    Returns:
        The classified error. The caller is expected to raise it from exc.
    """
    if isinstance(exc, StorageError):
        return exc

    if isinstance(exc, lmdb.NotFoundError):
        return KeyNotFoundError(key)

    return StorageError(str(exc) or exc.__class__.__name__)
