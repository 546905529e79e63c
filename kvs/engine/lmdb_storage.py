"""
LMDBStorage - Transactional key-value storage on an embedded LMDB environment.
"""

import asyncio
import logging
import shutil
from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

import lmdb

from kvs.engine.errors import classify_error
from kvs.engine.initializer import EnvironmentInitializer
from kvs.interfaces.storage import Storage
from kvs.models.exceptions import KeyNotFoundError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TxnMode(Enum):
    """Transaction access mode."""

    READ_ONLY = "read_only"
    READ_WRITE = "read_write"


class LMDBStorage(Storage):
    """
    Key-value storage backed by a private LMDB environment.

    Provides:
    - get(key): Exact-match lookup in a read-only transaction
    - set(key, value): Unconditional overwrite in a read-write transaction
    - delete(key): Removal in a read-write transaction

    Architecture:
    - One environment per instance, rooted at a fresh temporary directory
    - All pairs live in a single named keyspace, created by the first write
    - Every operation runs in its own transaction, executed on a worker
      thread so the event loop never blocks on disk I/O
    - LMDB serializes writers; readers see a snapshot and never block
    """

    # Name of the single keyspace holding all pairs
    KEYSPACE = b"kvs"

    # Default memory map size (64MB)
    DEFAULT_MAP_SIZE = 64 * 1024 * 1024

    def __init__(self, path: str, env: lmdb.Environment) -> None:
        """
        Wrap an already bootstrapped environment. Use LMDBStorage.open().

        Args:
            path: Directory holding the environment files.
            env: Open LMDB environment.
        """
        self._path = path
        self._env: lmdb.Environment | None = env

        # Keyspace handle, published once the creating transaction commits
        self._db = None

    @classmethod
    def open(
        cls,
        map_size: int = DEFAULT_MAP_SIZE,
        parent_dir: str | None = None
    ) -> "LMDBStorage":
        """
        Create a private environment and return a storage bound to it.

        Args:
            map_size: Maximum size of the memory map in bytes.
            parent_dir: Where to allocate the environment directory.

        Returns:
            Ready-to-use storage instance.

        Raises:
            InitializationError: If the environment cannot be created.
        """
        with EnvironmentInitializer(map_size, parent_dir) as initializer:
            path, env = initializer.initialize()
        return cls(path, env)

    @property
    def path(self) -> str:
        return self._path

    @property
    def closed(self) -> bool:
        return self._env is None

    # ------------------------------------------------------------------
    # Transaction helper
    # ------------------------------------------------------------------

    def _execute(
        self,
        mode: TxnMode,
        work: Callable[[lmdb.Transaction, Any], T],
        key: bytes | None = None
    ) -> T:
        """
        Run work inside a single transaction.

        The keyspace handle is read before the transaction begins and handed
        to work alongside the transaction, so a reader never sees a handle
        published after its snapshot was taken. It is None when no write has
        committed yet.

        Read-only transactions are always aborted once work returns, since
        they only hold a reader slot. Read-write transactions commit when
        work returns and abort when it raises or the commit fails. Engine
        errors are classified before they leave this method.

        Args:
            mode: Transaction access mode.
            work: Callable receiving the open transaction and keyspace handle.
            key: Key the work operates on, attached to not-found errors.

        Returns:
            Whatever work returns.
        """
        env = self._env
        if env is None:
            raise StorageError("storage is closed")

        db = self._db
        write = mode is TxnMode.READ_WRITE
        try:
            txn = env.begin(write=write)
        except lmdb.Error as e:
            raise classify_error(e, key) from e

        try:
            result = work(txn, db)
        except BaseException as e:
            txn.abort()
            logger.debug(f"Aborted {mode.value} transaction: {e!r}")
            if isinstance(e, lmdb.Error):
                raise classify_error(e, key) from e
            raise

        if not write:
            txn.abort()
            return result

        try:
            txn.commit()
        except lmdb.Error as e:
            txn.abort()
            raise classify_error(e, key) from e
        return result

    def _keyspace(
        self,
        txn: lmdb.Transaction,
        db,
        mode: TxnMode,
        key: bytes | None = None,
        create: bool = False
    ):
        """
        Resolve the keyspace handle for the current transaction.

        Args:
            txn: The current transaction.
            db: Handle captured before txn began, or None.
            mode: Access mode txn was begun with.
            key: Key being looked up, reported when the keyspace is missing.
            create: Create the keyspace if it does not exist yet.
                    Only honoured for read-write transactions.

        Raises:
            KeyNotFoundError: If the keyspace does not exist and create is False.
        """
        if db is not None:
            return db

        if mode is TxnMode.READ_ONLY:
            # Nothing had been written when this snapshot was taken
            raise KeyNotFoundError(key)

        # Writers see the latest state; a missing keyspace raises MDB_NOTFOUND
        return self._env.open_db(self.KEYSPACE, txn=txn, create=create)

    # ------------------------------------------------------------------
    # Synchronous operations
    # ------------------------------------------------------------------

    def get_sync(self, key: bytes) -> bytes:
        """
        Look up a key with an exact-match cursor seek.

        Args:
            key: The key to look up.

        Returns:
            The stored value.

        Raises:
            KeyNotFoundError: If the key (or the keyspace) does not exist.
        """
        def work(txn: lmdb.Transaction, db) -> bytes:
            db = self._keyspace(txn, db, TxnMode.READ_ONLY, key=key)
            with txn.cursor(db=db) as cursor:
                if not cursor.set_key(key):
                    raise KeyNotFoundError(key)
                return bytes(cursor.value())

        return self._execute(TxnMode.READ_ONLY, work, key)

    def set_sync(self, key: bytes, value: bytes) -> None:
        """
        Write a key-value pair, replacing any previous value.

        Args:
            key: The key to write.
            value: The value to store. Emptiness is not checked here.
        """
        def work(txn: lmdb.Transaction, db):
            db = self._keyspace(txn, db, TxnMode.READ_WRITE, key=key, create=True)
            txn.put(key, value, db=db, overwrite=True)
            return db

        db = self._execute(TxnMode.READ_WRITE, work, key)

        # Only a committed handle may be shared
        if self._db is None:
            self._db = db
            logger.debug(f"Created keyspace {self.KEYSPACE.decode()}")

    def delete_sync(self, key: bytes) -> None:
        """
        Remove a key.

        Args:
            key: The key to remove.

        Raises:
            KeyNotFoundError: If the key (or the keyspace) does not exist.
        """
        def work(txn: lmdb.Transaction, db) -> None:
            db = self._keyspace(txn, db, TxnMode.READ_WRITE, key=key)
            if not txn.delete(key, db=db):
                raise KeyNotFoundError(key)

        self._execute(TxnMode.READ_WRITE, work, key)

    # ------------------------------------------------------------------
    # Storage interface
    # ------------------------------------------------------------------

    async def get(self, key: bytes) -> bytes:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.get_sync, key)

    async def set(self, key: bytes, value: bytes) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.set_sync, key, value)

    async def delete(self, key: bytes) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.delete_sync, key)

    def close(self) -> None:
        """
        Close the environment and remove its directory.

        Must not be called while operations are in flight; callers stop
        issuing operations first. Repeat calls have no effect.
        """
        env = self._env
        if env is None:
            return

        self._env = None
        self._db = None
        env.close()
        shutil.rmtree(self._path, ignore_errors=True)
        logger.info(f"Closed storage environment at {self._path}")

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"LMDBStorage(path={self._path!r}, {state})"
