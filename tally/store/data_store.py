"""
In-memory dataset holder with replace-on-success semantics.

The DataStore owns the current list of categories. Every change goes
through replace_all(): the new dataset is persisted first and only then
becomes the in-memory dataset, so a failed save leaves both untouched.

Callers must not run two replacements concurrently.
"""

from typing import Optional
from uuid import UUID

from tally.audit import InterchangeLogger
from tally.demo import generate_demo_data
from tally.models.audit import InterchangeEventBuilder
from tally.models.category import Category, dataset_total
from tally.store.interface import DatasetStorageInterface


class DataStore:
    """Current dataset plus its persistence."""

    def __init__(
        self,
        storage: DatasetStorageInterface,
        event_logger: Optional[InterchangeLogger] = None,
    ):
        self._storage = storage
        self._event_logger = event_logger
        self._categories: list[Category] = []
        self.load()

    def load(self) -> None:
        """(Re)load the dataset from storage."""
        self._categories = self._storage.load()

    @property
    def categories(self) -> list[Category]:
        """A deep copy of the current dataset."""
        return [c.model_copy(deep=True) for c in self._categories]

    @property
    def grand_total(self) -> float:
        return dataset_total(self._categories)

    def is_empty(self) -> bool:
        return not self._categories

    def replace_all(
        self,
        categories: list[Category],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Atomically replace the whole dataset.

        Raises:
            StorageError: If persisting fails; nothing is changed
        """
        replacement = [c.model_copy(deep=True) for c in categories]
        previous_count = len(self._categories)

        self._storage.save(replacement)
        self._categories = replacement

        if self._event_logger:
            self._event_logger.log(
                InterchangeEventBuilder.dataset_replaced(
                    previous_count=previous_count,
                    new_count=len(replacement),
                    correlation_id=correlation_id,
                )
            )

    def load_demo_data(self, seed: Optional[int] = None) -> list[Category]:
        """Replace everything with generated demo data."""
        demo = generate_demo_data(seed=seed)
        self.replace_all(demo)
        if self._event_logger:
            self._event_logger.log(InterchangeEventBuilder.demo_data_generated(len(demo)))
        return self.categories
