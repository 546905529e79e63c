"""
Shared pytest fixtures for key-value store tests.
"""

import tempfile

import pytest

from kvs.engine.lmdb_storage import LMDBStorage
from kvs.engine.memory_storage import MemoryStorage


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def storage(temp_dir):
    """Provide an open LMDBStorage rooted under a temporary directory."""
    db = LMDBStorage.open(parent_dir=temp_dir)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def memory_storage():
    """Provide a fresh in-memory storage."""
    db = MemoryStorage()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(params=["lmdb", "memory"])
def any_storage(request, temp_dir):
    """Provide each Storage implementation in turn."""
    if request.param == "lmdb":
        db = LMDBStorage.open(parent_dir=temp_dir)
    else:
        db = MemoryStorage()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def sample_entries():
    """Provide sample key-value entries for testing."""
    return [
        (b"/key1", b"value1"),
        (b"/key2", b"value2"),
        (b"/key3", b"value3"),
    ]
