"""
Storage backends.
"""

from kvs.engine.lmdb_storage import LMDBStorage, TxnMode
from kvs.engine.memory_storage import MemoryStorage

__all__ = ["LMDBStorage", "MemoryStorage", "TxnMode"]
