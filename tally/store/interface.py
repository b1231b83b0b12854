"""
Abstract Storage Interface

DESIGN DECISION: Dataset persistence is abstract.
This allows us to:
1. Use a JSON key-value file on disk for the app
2. Use in-memory storage for testing
3. Keep the interchange pipeline decoupled from persistence

The interface is intentionally tiny: the dataset is always loaded and
saved as a whole.
"""

from abc import ABC, abstractmethod
from typing import Optional

from tally.models.category import Category


class DatasetStorageInterface(ABC):
    """
    Abstract interface for dataset persistence.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self) -> list[Category]:
        """
        Load the stored dataset.

        Returns:
            The stored categories, or an empty list if nothing is stored
        """
        pass

    @abstractmethod
    def save(self, categories: list[Category]) -> None:
        """
        Replace the stored dataset.

        Args:
            categories: The complete dataset to store

        Raises:
            StorageError: If the write fails; the previous dataset stays stored
        """
        pass


class InMemoryStorage(DatasetStorageInterface):
    """Dataset storage held in process memory."""

    def __init__(self, categories: Optional[list[Category]] = None):
        self._categories = [c.model_copy(deep=True) for c in categories or []]
        self.save_count = 0

    def load(self) -> list[Category]:
        return [c.model_copy(deep=True) for c in self._categories]

    def save(self, categories: list[Category]) -> None:
        self._categories = [c.model_copy(deep=True) for c in categories]
        self.save_count += 1


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
