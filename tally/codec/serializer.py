"""
Dataset Serializer

Dataset <-> canonical JSON bytes. The same contract backs the plain-text
interchange variant, which only adds indentation.
"""

import structlog
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from tally.codec.errors import EncodingFailedError, MalformedDataError
from tally.models.category import WIRE_CONTEXT, Category, Dataset


logger = structlog.get_logger(__name__)

_DATASET_ADAPTER = TypeAdapter(list[Category])


def serialize(categories: Dataset) -> bytes:
    """Encode the dataset as compact UTF-8 JSON."""
    try:
        data = _DATASET_ADAPTER.dump_json(categories)
    except (PydanticSerializationError, ValueError, TypeError) as e:
        raise EncodingFailedError(f"Failed to encode data: {e}") from e
    logger.debug("dataset_serialized", categories=len(categories), size=len(data))
    return data


def deserialize(data: bytes) -> Dataset:
    """
    Decode JSON bytes into a dataset.

    Amounts, names and descriptions must have their JSON types, dates
    must be ISO-8601 strings and every field must be present. Unknown
    fields are ignored.

    Raises:
        MalformedDataError: If the bytes are not a valid dataset
    """
    try:
        return _DATASET_ADAPTER.validate_json(data, context=WIRE_CONTEXT)
    except ValidationError as e:
        raise MalformedDataError(
            f"Failed to decode data: {e.error_count()} problem(s), "
            f"first: {e.errors()[0]['msg']}"
        ) from e


def to_text(categories: Dataset) -> str:
    """Pretty-printed JSON for the text interchange path."""
    try:
        return _DATASET_ADAPTER.dump_json(categories, indent=2).decode("utf-8")
    except (PydanticSerializationError, ValueError, TypeError) as e:
        raise EncodingFailedError(f"Failed to encode data: {e}") from e


def from_text(text: str) -> Dataset:
    """Inverse of to_text(); accepts compact JSON too."""
    return deserialize(text.encode("utf-8"))
