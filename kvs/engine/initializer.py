"""
EnvironmentInitializer - Allocate and bootstrap the LMDB environment.
"""

import logging
import shutil
import tempfile

import lmdb

from kvs.models.exceptions import InitializationError

logger = logging.getLogger(__name__)

# Temporary directory prefix for the private environment
DIR_PREFIX = "simple-kvs"

# The environment holds exactly one named keyspace
MAX_DBS = 1


class EnvironmentInitializer:
    """
    Creates the process-private LMDB environment.

    Responsibilities:
    - Allocate a fresh temporary directory
    - Open the environment configured for a single named keyspace
    - Run an empty write transaction to prove the environment is writable
    - Tear down whatever was created if any step fails
    """

    def __init__(self, map_size: int, parent_dir: str | None = None) -> None:
        """
        Initialize the environment initializer.

        Args:
            map_size: Maximum size of the memory map in bytes.
            parent_dir: Directory to create the environment under.
                        Defaults to the system temporary directory.
        """
        if map_size <= 0:
            raise ValueError(f"map_size must be positive, got {map_size}")

        self.map_size = map_size
        self.parent_dir = parent_dir
        self.path: str | None = None
        self.env: lmdb.Environment | None = None

    def initialize(self) -> tuple[str, lmdb.Environment]:
        """
        Allocate, open and bootstrap the environment.

        Returns:
            Tuple of (directory path, open environment).

        Raises:
            InitializationError: If any step fails. Partial state is removed.
        """
        try:
            self.path = tempfile.mkdtemp(prefix=DIR_PREFIX, dir=self.parent_dir)
            self.env = lmdb.open(self.path, map_size=self.map_size, max_dbs=MAX_DBS)
            self._bootstrap(self.env)
        except (OSError, lmdb.Error) as e:
            self.cleanup()
            raise InitializationError(f"cannot initialize storage: {e}") from e

        logger.info(f"Opened storage environment at {self.path}")
        return self.path, self.env

    def _bootstrap(self, env: lmdb.Environment) -> None:
        """Commit one empty write transaction."""
        txn = env.begin(write=True)
        try:
            txn.commit()
        except lmdb.Error:
            txn.abort()
            raise

    def cleanup(self) -> None:
        """Close the environment (if opened) and remove the directory (if allocated)."""
        if self.env is not None:
            self.env.close()
            self.env = None

        if self.path is not None:
            shutil.rmtree(self.path, ignore_errors=True)
            self.path = None

    def __enter__(self) -> "EnvironmentInitializer":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit. Discards partial state on failure."""
        if exc_type is not None:
            self.cleanup()
