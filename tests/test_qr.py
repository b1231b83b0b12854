"""Tests for the QR image codec and the banner."""

import base64
import random
from datetime import date

import pytest
from PIL import Image

from tally.codec.banner import BannerRenderer, format_export_date
from tally.codec.capacity import QRCarrier
from tally.codec.compressor import compress
from tally.codec.errors import ImageGenerationFailedError, InvalidDataError
from tally.codec.qr import QRCodec


PAYLOAD = compress(b'[{"id":"0b5f","name":"Groceries","items":[]}]')

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


class TestQRText:
    """base64 text stored in the symbol."""

    def test_encode_text_is_base64(self):
        """Test the symbol content is standard base64."""
        assert QRCodec.encode_text(PAYLOAD) == base64.b64encode(PAYLOAD).decode("ascii")

    def test_scanned_text_round_trip(self):
        """Test decode_scanned(encode_text(p)) == p."""
        assert QRCodec.decode_scanned(QRCodec.encode_text(PAYLOAD)) == PAYLOAD

    def test_scanned_bytes_round_trip(self):
        """Test scanners returning bytes."""
        scanned = QRCodec.encode_text(PAYLOAD).encode("ascii")
        assert QRCodec.decode_scanned(scanned) == PAYLOAD

    def test_surrounding_whitespace_tolerated(self):
        """Test a trailing newline from the scanner."""
        assert QRCodec.decode_scanned(QRCodec.encode_text(PAYLOAD) + "\n") == PAYLOAD

    @pytest.mark.parametrize("content", ["not base64!!", "abc", "Zm9v=YmFy"])
    def test_invalid_base64(self, content):
        """Test non-base64 text raises InvalidDataError."""
        with pytest.raises(InvalidDataError, match="Invalid QR code data"):
            QRCodec.decode_scanned(content)

    def test_non_ascii_bytes(self):
        """Test binary scanner output raises InvalidDataError."""
        with pytest.raises(InvalidDataError):
            QRCodec.decode_scanned(b"\xff\xfe\x00")


class TestQRImage:
    """Rasterised symbol."""

    def test_image_geometry(self):
        """Test modules * scale plus the white margin."""
        codec = QRCodec(scale=4, margin=8)
        matrix = codec.build_matrix(codec.encode_text(PAYLOAD))
        image = codec.encode(PAYLOAD)
        side = len(matrix) * 4 + 16
        assert image.size == (side, side)
        assert image.mode == "RGBA"

    def test_raster_matches_matrix(self):
        """Test every module is drawn as a solid scale x scale block."""
        codec = QRCodec(scale=3, margin=5)
        matrix = codec.build_matrix(codec.encode_text(PAYLOAD))
        image = codec.encode(PAYLOAD)
        for row, modules in enumerate(matrix):
            for col, dark in enumerate(modules):
                expected = BLACK if dark else WHITE
                assert image.getpixel((5 + col * 3 + 1, 5 + row * 3 + 1)) == expected

    def test_finder_pattern_corner(self):
        """Test the top-left finder pattern starts after the quiet zone."""
        codec = QRCodec(scale=4, margin=8, quiet_zone=4)
        image = codec.encode(PAYLOAD)
        assert image.getpixel((0, 0)) == WHITE
        assert image.getpixel((8 + 4 * 4, 8 + 4 * 4)) == BLACK

    def test_overflow_raises_image_generation_failed(self):
        """Test a payload within the planner constant can still overflow the symbol."""
        codec = QRCodec(error_correction="H")
        payload = random.Random(5).randbytes(2953)
        with pytest.raises(ImageGenerationFailedError, match="level H"):
            codec.encode(payload)

    def test_default_capacity_fits_symbol(self):
        """Test a payload of exactly the default budget encodes at level H."""
        capacity = QRCarrier().capacity_bytes
        payload = random.Random(7).randbytes(capacity)
        codec = QRCodec(capacity_bytes=capacity, error_correction="H", scale=1, margin=0)
        image = codec.encode(payload)
        assert image.size[0] == len(codec.build_matrix(codec.encode_text(payload)))

    def test_lower_level_holds_more(self):
        """Test level L accepts text that level H rejects."""
        payload = random.Random(6).randbytes(1500)
        with pytest.raises(ImageGenerationFailedError):
            QRCodec(error_correction="H").encode(payload)
        assert QRCodec(error_correction="L", scale=1, margin=0).encode(payload).size[0] > 0

    def test_carrier_for(self):
        """Test the planner constant is exposed as a QRCarrier."""
        assert QRCodec(capacity_bytes=1000).carrier_for(10) == QRCarrier(capacity_bytes=1000)

    def test_unknown_level(self):
        """Test invalid error-correction levels."""
        with pytest.raises(ValueError):
            QRCodec(error_correction="X")


class TestQRDecodeImage:
    """Image decoding goes through a scanner."""

    def test_without_scanner(self):
        """Test decode fails cleanly when no scanner is available."""
        codec = QRCodec()
        with pytest.raises(InvalidDataError, match="scanner"):
            codec.decode(codec.encode(PAYLOAD))

    def test_with_scanner(self):
        """Test the scanner output is decoded."""
        seen = []

        def scanner(image: Image.Image) -> str:
            seen.append(image.size)
            return QRCodec.encode_text(PAYLOAD)

        codec = QRCodec(scanner=scanner)
        image = codec.encode(PAYLOAD)
        assert codec.decode(image) == PAYLOAD
        assert seen == [image.size]


class TestBanner:
    """Title/date header."""

    def test_format_export_date(self):
        """Test the date line."""
        assert format_export_date(date(2025, 3, 9)) == "Exported Mar 09, 2025"

    def test_render_size_and_content(self):
        """Test the banner strip has text drawn on it."""
        banner = BannerRenderer(height=40).render(300, exported_at=date(2025, 3, 9))
        assert banner.size == (300, 40)
        assert banner.getpixel((0, 0)) == WHITE
        assert len(banner.getcolors(maxcolors=300 * 40)) > 1

    def test_render_explicit_height(self):
        """Test the height override."""
        assert BannerRenderer(height=40).render(100, height=12).size == (100, 12)

    def test_qr_banner_stacked_above(self):
        """Test the symbol is moved down, unchanged."""
        codec = QRCodec(scale=2, margin=4)
        image = codec.encode(PAYLOAD)
        bannered = codec.add_banner(image, BannerRenderer(height=30), exported_at=date(2025, 3, 9))
        assert bannered.size == (image.width, image.height + 30)
        assert bannered.crop((0, 30, image.width, image.height + 30)).tobytes() == image.tobytes()

    def test_qr_banner_zero_height(self):
        """Test a zero-height banner leaves the image alone."""
        codec = QRCodec(scale=2, margin=4)
        image = codec.encode(PAYLOAD)
        assert codec.add_banner(image, BannerRenderer(height=0)).size == image.size
