"""
Error taxonomy for the key-value store.

Every failure raised by a storage backend is a StorageError carrying an
ErrorKind tag. Callers branch on the tag (or on the subclass), never on the
identity of a shared error instance.
"""

from enum import Enum


class ErrorKind(Enum):
    """Classification of storage failures."""

    NOT_FOUND = "not_found"
    STORAGE = "storage"
    INITIALIZATION = "initialization"


class StorageError(Exception):
    """
    Raised for any storage failure that is not a missing key.

    The engine's own exception, when there is one, is chained as __cause__
    and its message is forwarded unchanged.
    """

    kind: ErrorKind = ErrorKind.STORAGE

    @property
    def is_not_found(self) -> bool:
        return self.kind is ErrorKind.NOT_FOUND


class KeyNotFoundError(StorageError):
    """
    Raised when the requested key does not exist.

    Covers both a keyspace that was never created and a key that was never
    written or has already been deleted.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, key: bytes | None = None, message: str = "storage: key not found"):
        """
        Initialize not-found error.

        Args:
            key: The key that was looked up, if known.
            message: Human readable message.
        """
        self.key = key
        super().__init__(message)


class InitializationError(StorageError):
    """
    Raised when the storage environment cannot be opened or bootstrapped.

    This is fatal: the process cannot start without a working environment.
    """

    kind = ErrorKind.INITIALIZATION
