"""
Abstract base classes for the key-value store.
"""

from kvs.interfaces.storage import Storage

__all__ = ["Storage"]
