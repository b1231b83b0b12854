"""Visual interchange codec package."""

from tally.codec.banner import BannerRenderer
from tally.codec.base import ImageCodec
from tally.codec.capacity import (
    CarrierSpec,
    QRCarrier,
    StegoCarrier,
    ensure_capacity,
    max_capacity,
)
from tally.codec.compressor import compress, decompress
from tally.codec.errors import (
    CodecError,
    CompressionFailedError,
    CorruptStreamError,
    DataTooLargeError,
    DecodeError,
    EncodingFailedError,
    ExportError,
    ImageGenerationFailedError,
    InvalidDataError,
    MalformedDataError,
    PayloadTooLargeError,
)
from tally.codec.imageio import from_image_bytes, to_png
from tally.codec.qr import QRCodec, QRScanner
from tally.codec.serializer import deserialize, from_text, serialize, to_text
from tally.codec.steganography import SteganographyCodec

__all__ = [
    # Strategies
    "ImageCodec",
    "QRCodec",
    "QRScanner",
    "SteganographyCodec",
    "BannerRenderer",
    # Capacity
    "CarrierSpec",
    "QRCarrier",
    "StegoCarrier",
    "ensure_capacity",
    "max_capacity",
    # Bytes
    "compress",
    "decompress",
    "deserialize",
    "from_text",
    "serialize",
    "to_text",
    "from_image_bytes",
    "to_png",
    # Errors
    "CodecError",
    "CompressionFailedError",
    "CorruptStreamError",
    "DataTooLargeError",
    "DecodeError",
    "EncodingFailedError",
    "ExportError",
    "ImageGenerationFailedError",
    "InvalidDataError",
    "MalformedDataError",
    "PayloadTooLargeError",
]
