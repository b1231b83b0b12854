"""
Storage Package

Provides the abstract dataset storage interface, a JSON key-value file
implementation, an in-memory implementation and the DataStore that owns
the current dataset.
"""

from tally.store.interface import (
    DatasetStorageInterface,
    InMemoryStorage,
    StorageError,
)
from tally.store.json_file import JsonFileStorage
from tally.store.data_store import DataStore

__all__ = [
    # Interfaces
    "DatasetStorageInterface",
    # Exceptions
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
    "DataStore",
]
