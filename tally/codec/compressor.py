"""
Payload Compressor

gzip-framed DEFLATE (RFC 1952): any gzip implementation can read what we
write, and the CRC32/ISIZE trailer lets us reject damaged streams instead
of importing garbage.

Decompression output is bounded. A stream that would inflate past the
limit is rejected with PayloadTooLargeError before the excess is produced.
"""

import zlib

import structlog

from tally.codec.errors import (
    CompressionFailedError,
    CorruptStreamError,
    PayloadTooLargeError,
)


logger = structlog.get_logger(__name__)

# zlib window bits selecting the gzip header/trailer
GZIP_WBITS = 16 + zlib.MAX_WBITS

DEFAULT_LEVEL = 9
DEFAULT_MAX_DECOMPRESSED = 10 * 1024 * 1024


def compress(data: bytes, level: int = DEFAULT_LEVEL) -> bytes:
    """Compress bytes into a single gzip member."""
    try:
        compressor = zlib.compressobj(level, zlib.DEFLATED, GZIP_WBITS)
        compressed = compressor.compress(data) + compressor.flush(zlib.Z_FINISH)
    except (zlib.error, ValueError) as e:
        raise CompressionFailedError(f"Failed to compress data: {e}") from e

    logger.debug("payload_compressed", raw_size=len(data), compressed_size=len(compressed))
    return compressed


def decompress(data: bytes, max_size: int = DEFAULT_MAX_DECOMPRESSED) -> bytes:
    """
    Decompress a single gzip member.

    Raises:
        CorruptStreamError: Bad header, checksum mismatch, truncation or trailing bytes
        PayloadTooLargeError: Output would exceed max_size
    """
    decompressor = zlib.decompressobj(GZIP_WBITS)
    try:
        # One byte over the limit is enough to know the limit is exceeded
        output = decompressor.decompress(data, max_size + 1)
    except zlib.error as e:
        raise CorruptStreamError(f"Failed to decompress data: {e}") from e

    if len(output) > max_size:
        raise PayloadTooLargeError(max_size)

    if not decompressor.eof:
        raise CorruptStreamError("Failed to decompress data: stream is truncated")

    if decompressor.unused_data:
        raise CorruptStreamError(
            f"Failed to decompress data: {len(decompressor.unused_data)} "
            "unexpected bytes after end of stream"
        )

    logger.debug("payload_decompressed", compressed_size=len(data), raw_size=len(output))
    return output
