"""
QR Image Codec

Export: payload -> base64 text -> QR symbol (auto version, fixed
error-correction level) -> upscaled by an integer factor onto a white
canvas.

Import: symbol recognition belongs to a scanner (camera or decoding
library) that returns the text it read. This codec only turns that text
back into payload bytes.
"""

import base64
import binascii
from datetime import date
from typing import Callable, Optional, Union

import qrcode
import qrcode.constants
import qrcode.exceptions
import structlog
from PIL import Image

from tally.codec.banner import WHITE, BannerRenderer
from tally.codec.base import ImageCodec
from tally.codec.capacity import QRCarrier
from tally.codec.errors import ImageGenerationFailedError, InvalidDataError


logger = structlog.get_logger(__name__)

ERROR_CORRECTION_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}

# Reads a QR symbol from an image and returns the raw decoded content
QRScanner = Callable[[Image.Image], Union[bytes, str]]


class QRCodec(ImageCodec):
    """Payload bytes <-> scannable QR image."""

    kind = "qr"

    def __init__(
        self,
        capacity_bytes: int = 954,
        error_correction: str = "H",
        scale: int = 10,
        quiet_zone: int = 4,
        margin: int = 20,
        scanner: Optional[QRScanner] = None,
    ):
        if error_correction not in ERROR_CORRECTION_LEVELS:
            raise ValueError(f"Unknown QR error-correction level: {error_correction}")
        self.capacity_bytes = capacity_bytes
        self.error_correction = error_correction
        self.scale = scale
        self.quiet_zone = quiet_zone
        self.margin = margin
        self.scanner = scanner

    def carrier_for(self, payload_size: int) -> QRCarrier:
        return QRCarrier(capacity_bytes=self.capacity_bytes)

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    @staticmethod
    def encode_text(payload: bytes) -> str:
        """The text actually stored in the symbol."""
        return base64.b64encode(payload).decode("ascii")

    def build_matrix(self, text: str) -> list[list[bool]]:
        """
        Module matrix for the text, quiet zone included (True = dark).

        Raises:
            ImageGenerationFailedError: If no symbol version can hold the text
        """
        qr = qrcode.QRCode(
            version=None,
            error_correction=ERROR_CORRECTION_LEVELS[self.error_correction],
            box_size=1,
            border=self.quiet_zone,
        )
        qr.add_data(text)
        try:
            qr.make(fit=True)
        except (qrcode.exceptions.DataOverflowError, ValueError) as e:
            raise ImageGenerationFailedError(
                f"Failed to generate QR code: {len(text)} characters do not fit "
                f"a symbol at error-correction level {self.error_correction}"
            ) from e
        logger.debug("qr_symbol_built", version=qr.version, characters=len(text))
        return qr.get_matrix()

    def encode(self, payload: bytes) -> Image.Image:
        matrix = self.build_matrix(self.encode_text(payload))
        modules = len(matrix)

        symbol = Image.new("L", (modules, modules), 255)
        symbol.putdata([0 if dark else 255 for row in matrix for dark in row])
        side = modules * self.scale
        symbol = symbol.resize((side, side), Image.Resampling.NEAREST)

        canvas = Image.new("RGBA", (side + 2 * self.margin, side + 2 * self.margin), WHITE)
        canvas.paste(symbol.convert("RGBA"), (self.margin, self.margin))
        return canvas

    # -------------------------------------------------------------------------
    # Decoding
    # -------------------------------------------------------------------------

    def decode(self, image: Image.Image) -> bytes:
        """
        Scan the image with the configured scanner, then decode the text.

        Raises:
            InvalidDataError: If no scanner is configured or the content is not base64
        """
        if self.scanner is None:
            raise InvalidDataError("No QR scanner is available to read this image")
        return self.decode_scanned(self.scanner(image))

    @staticmethod
    def decode_scanned(content: Union[bytes, str]) -> bytes:
        """
        Turn scanner output back into payload bytes.

        Raises:
            InvalidDataError: If the content is not valid base64 text
        """
        if isinstance(content, bytes):
            try:
                content = content.decode("ascii")
            except UnicodeDecodeError as e:
                raise InvalidDataError() from e
        try:
            return base64.b64decode(content.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidDataError() from e

    # -------------------------------------------------------------------------
    # Banner
    # -------------------------------------------------------------------------

    def add_banner(
        self,
        image: Image.Image,
        renderer: BannerRenderer,
        exported_at: Optional[date] = None,
    ) -> Image.Image:
        """Stack the banner above the symbol canvas."""
        source = image.convert("RGBA")
        if renderer.height <= 0:
            return source
        banner = renderer.render(source.width, exported_at=exported_at)
        result = Image.new("RGBA", (source.width, banner.height + source.height), WHITE)
        result.paste(banner, (0, 0))
        result.paste(source, (0, banner.height))
        return result
