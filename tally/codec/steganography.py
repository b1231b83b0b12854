"""
Steganographic Image Codec

Hides the payload in the low bits of pixel channel values.

BIT LAYOUT (fixed, shared by encoder and decoder):
1. Stream = 4-byte big-endian payload length + payload
2. Each stream byte is split MSB-first into bits_per_channel-wide chunks
3. Chunks fill channels R, G, B of each pixel, pixels left to right,
   rows top to bottom, starting at the first row below the banner
4. Alpha is always opaque and never carries data

Only exact pixel values survive, so carriers must be stored losslessly
(PNG). JPEG, scaling and colour-space conversion destroy the payload.
"""

from datetime import date
from typing import Iterator, Optional

import structlog
from PIL import Image

from tally.codec.banner import BannerRenderer
from tally.codec.base import ImageCodec
from tally.codec.capacity import (
    LENGTH_PREFIX_BYTES,
    PAYLOAD_CHANNELS,
    StegoCarrier,
    ensure_capacity,
    max_capacity,
)
from tally.codec.errors import DataTooLargeError, ImageGenerationFailedError, InvalidDataError


logger = structlog.get_logger(__name__)

# Light grey; low bits are overwritten with payload
NEUTRAL_FILL = 0xC8
OPAQUE = 0xFF
BYTES_PER_PIXEL = 4  # RGBA


class SteganographyCodec(ImageCodec):
    """
    Embeds payload bytes directly into pixel data.

    The codec either generates a neutral carrier sized to the payload or
    writes into a caller-supplied image of sufficient size.
    """

    kind = "steganography"

    def __init__(
        self,
        bits_per_channel: int = 1,
        header_rows: int = 0,
        min_width: int = 1,
        max_width: int = 4096,
        max_height: Optional[int] = None,
    ):
        if bits_per_channel not in (1, 2, 4, 8):
            raise ValueError("bits_per_channel must be one of 1, 2, 4, 8")
        self.bits_per_channel = bits_per_channel
        self.header_rows = header_rows
        self.min_width = min_width
        self.max_width = max_width
        self.max_height = max_height
        self._value_mask = (1 << bits_per_channel) - 1
        self._chunks_per_byte = 8 // bits_per_channel

    def carrier_for(self, payload_size: int) -> StegoCarrier:
        return StegoCarrier.fitting(
            payload_size,
            bits_per_channel=self.bits_per_channel,
            header_rows=self.header_rows,
            min_width=self.min_width,
            max_width=self.max_width,
            max_height=self.max_height,
        )

    def carrier_of(self, image: Image.Image) -> StegoCarrier:
        """Geometry of an existing image under this codec's convention."""
        try:
            return StegoCarrier(
                width=image.width,
                height=image.height,
                bits_per_channel=self.bits_per_channel,
                header_rows=self.header_rows,
            )
        except ValueError as e:
            raise InvalidDataError(
                f"Image is {image.width}x{image.height}, too small for a carrier "
                f"with {self.header_rows} banner rows"
            ) from e

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def encode(
        self,
        payload: bytes,
        carrier_image: Optional[Image.Image] = None,
    ) -> Image.Image:
        """
        Embed the length-prefixed payload.

        Args:
            payload: Bytes to hide
            carrier_image: Optional cover image; its high bits are kept.
                If omitted, a neutral grey carrier just big enough is generated.

        Raises:
            DataTooLargeError: If the payload does not fit the carrier
        """
        if len(payload) >= 1 << (8 * LENGTH_PREFIX_BYTES):
            raise DataTooLargeError(len(payload), (1 << (8 * LENGTH_PREFIX_BYTES)) - 1)

        if carrier_image is None:
            carrier = self.carrier_for(len(payload))
        else:
            try:
                carrier = self.carrier_of(carrier_image)
            except InvalidDataError as e:
                raise ImageGenerationFailedError(e.description) from e

        ensure_capacity(payload, carrier)

        if carrier_image is None:
            pixels = bytearray(
                bytes((NEUTRAL_FILL, NEUTRAL_FILL, NEUTRAL_FILL, OPAQUE))
                * (carrier.width * carrier.height)
            )
        else:
            pixels = bytearray(carrier_image.convert("RGBA").tobytes())

        stream = len(payload).to_bytes(LENGTH_PREFIX_BYTES, "big") + payload
        offset = carrier.header_rows * carrier.width * BYTES_PER_PIXEL
        keep_mask = 0xFF ^ self._value_mask

        for index, chunk in enumerate(self._chunks(stream)):
            pixel, channel = divmod(index, PAYLOAD_CHANNELS)
            position = offset + pixel * BYTES_PER_PIXEL + channel
            pixels[position] = (pixels[position] & keep_mask) | chunk

        if carrier_image is not None:
            # Payload rows must stay opaque so re-encoders cannot alter RGB
            for alpha in range(offset + 3, len(pixels), BYTES_PER_PIXEL):
                pixels[alpha] = OPAQUE

        logger.debug(
            "steganography_encoded",
            payload_size=len(payload),
            width=carrier.width,
            height=carrier.height,
            bits_per_channel=self.bits_per_channel,
        )
        return Image.frombytes("RGBA", (carrier.width, carrier.height), bytes(pixels))

    def _chunks(self, stream: bytes) -> Iterator[int]:
        width = self.bits_per_channel
        for byte in stream:
            for shift in range(8 - width, -1, -width):
                yield (byte >> shift) & self._value_mask

    # -------------------------------------------------------------------------
    # Decoding
    # -------------------------------------------------------------------------

    def decode(self, image: Image.Image) -> bytes:
        """
        Read the length prefix, then exactly that many payload bytes.

        Pixels past the declared length are never read.

        Raises:
            InvalidDataError: If the image cannot hold a prefix or the
                prefix declares more bytes than the image can hold
        """
        carrier = self.carrier_of(image)
        if carrier.bit_capacity < LENGTH_PREFIX_BYTES * 8:
            raise InvalidDataError("Image is too small to contain any data")

        pixels = image.convert("RGBA").tobytes()
        offset = carrier.header_rows * carrier.width * BYTES_PER_PIXEL

        prefix = self._read_bytes(pixels, offset, 0, LENGTH_PREFIX_BYTES)
        length = int.from_bytes(prefix, "big")
        capacity = max_capacity(carrier)
        if length > capacity:
            raise InvalidDataError(
                f"Image does not contain Category Tally data "
                f"(declares {length} bytes, can hold at most {capacity})"
            )

        payload = self._read_bytes(pixels, offset, LENGTH_PREFIX_BYTES, length)
        logger.debug("steganography_decoded", payload_size=length)
        return payload

    def _read_bytes(self, pixels: bytes, offset: int, start: int, count: int) -> bytes:
        """Reassemble `count` stream bytes beginning at stream byte `start`."""
        out = bytearray(count)
        chunk_index = start * self._chunks_per_byte
        for i in range(count):
            value = 0
            for _ in range(self._chunks_per_byte):
                pixel, channel = divmod(chunk_index, PAYLOAD_CHANNELS)
                sample = pixels[offset + pixel * BYTES_PER_PIXEL + channel]
                value = (value << self.bits_per_channel) | (sample & self._value_mask)
                chunk_index += 1
            out[i] = value
        return bytes(out)

    # -------------------------------------------------------------------------
    # Banner
    # -------------------------------------------------------------------------

    def add_banner(
        self,
        image: Image.Image,
        renderer: BannerRenderer,
        exported_at: Optional[date] = None,
    ) -> Image.Image:
        """Paint the banner into the reserved header rows only."""
        result = image.convert("RGBA")
        if self.header_rows == 0:
            return result
        banner = renderer.render(result.width, height=self.header_rows, exported_at=exported_at)
        result.paste(banner, (0, 0))
        return result
