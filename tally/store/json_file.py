"""
JSON File Key-Value Storage

A local key-value store kept in one JSON object on disk. The dataset is a
JSON array of categories under a single named key ("SavedCategories" by
default); other keys in the file are left untouched.

TRADEOFFS:
- The whole file is rewritten on every save (fine for a personal dataset)
- Writes go to a temporary file first, so a failed save never truncates
  the previous data
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from tally.config import get_settings
from tally.models.category import WIRE_CONTEXT, Category
from tally.store.interface import DatasetStorageInterface, StorageError


logger = structlog.get_logger(__name__)

_DATASET_ADAPTER = TypeAdapter(list[Category])


class JsonFileStorage(DatasetStorageInterface):
    """Dataset storage backed by a JSON key-value file."""

    def __init__(
        self,
        path: Optional[Path] = None,
        save_key: Optional[str] = None,
    ):
        settings = get_settings().store
        self._path = Path(path) if path is not None else settings.path
        self._save_key = save_key or settings.save_key

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not read {self._path}: {e}") from e
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("store_file_unreadable", path=str(self._path))
            return {}
        if not isinstance(data, dict):
            logger.warning("store_file_not_an_object", path=str(self._path))
            return {}
        return data

    def load(self) -> list[Category]:
        """
        Load the dataset stored under the save key.

        A missing file or key yields an empty dataset. So does a stored
        value that no longer decodes; that case is logged.
        """
        stored = self._read_all().get(self._save_key)
        if stored is None:
            return []
        try:
            return _DATASET_ADAPTER.validate_python(stored, context=WIRE_CONTEXT)
        except ValidationError as e:
            logger.warning(
                "stored_dataset_invalid",
                key=self._save_key,
                error_count=e.error_count(),
            )
            return []

    def save(self, categories: list[Category]) -> None:
        data = self._read_all()
        data[self._save_key] = _DATASET_ADAPTER.dump_python(categories, mode="json")

        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, ensure_ascii=False)
                os.replace(temp_name, self._path)
            except BaseException:
                if os.path.exists(temp_name):
                    os.unlink(temp_name)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {self._path}: {e}") from e

        logger.debug("dataset_saved", path=str(self._path), categories=len(categories))
