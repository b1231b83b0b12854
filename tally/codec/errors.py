"""
Codec Error Taxonomy

Every failure on the export or import path is raised as one of these.
All of them are recoverable: the caller shows `description` to the user
and the stored dataset is left as it was.
"""

from typing import Optional


class CodecError(Exception):
    """Base exception for interchange codec errors."""

    default_description = "The data could not be processed"

    def __init__(self, description: Optional[str] = None):
        self.description = description or self.default_description
        super().__init__(self.description)


# =============================================================================
# EXPORT SIDE
# =============================================================================

class ExportError(CodecError):
    """Base exception for export failures."""
    pass


class EncodingFailedError(ExportError):
    """The dataset could not be serialized."""
    default_description = "Failed to encode data"


class CompressionFailedError(ExportError):
    """The compressor could not produce a stream."""
    default_description = "Failed to compress data"


class DataTooLargeError(ExportError):
    """The compressed payload does not fit the carrier."""

    def __init__(self, size: int, capacity: int, carrier: str = "image"):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"Data is too large for a {carrier} ({size} bytes, limit {capacity}). "
            "Try removing some categories or expenses."
        )


class ImageGenerationFailedError(ExportError):
    """The carrier image could not be built."""
    default_description = "Failed to generate image"


# =============================================================================
# IMPORT SIDE
# =============================================================================

class DecodeError(CodecError):
    """Base exception for import failures."""
    default_description = "Failed to decode data"


class CorruptStreamError(DecodeError):
    """Compressed stream is truncated or fails its integrity check."""
    default_description = "Failed to decompress data"


class PayloadTooLargeError(DecodeError):
    """Decompressed output exceeds the configured bound."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(
            f"Decompressed data exceeds the {limit} byte limit"
        )


class InvalidDataError(DecodeError):
    """Input is not a recognizable carrier or encoded payload."""
    default_description = "Invalid QR code data"


class MalformedDataError(DecodeError):
    """Decoded JSON is missing fields or has wrong types."""
    default_description = "Failed to decode data"
