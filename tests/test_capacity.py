"""Tests for the carrier capacity planner."""

import pytest

from tally.codec.capacity import (
    QRCarrier,
    StegoCarrier,
    carrier_adapter,
    ensure_capacity,
    max_capacity,
)
from tally.codec.errors import DataTooLargeError


class TestQRCapacity:
    """QR capacity is a configured constant."""

    def test_default_constant(self):
        """Test the default QR budget."""
        assert max_capacity(QRCarrier()) == 954

    def test_exact_capacity_accepted(self):
        """Test a payload of exactly the capacity passes."""
        ensure_capacity(b"x" * 954, QRCarrier())

    def test_one_over_rejected(self):
        """Test capacity + 1 bytes fails with DataTooLargeError."""
        with pytest.raises(DataTooLargeError, match="QR code") as exc_info:
            ensure_capacity(b"x" * 955, QRCarrier())
        assert exc_info.value.size == 955
        assert exc_info.value.capacity == 954

    def test_configured_constant(self):
        """Test a custom capacity."""
        carrier = QRCarrier(capacity_bytes=100)
        ensure_capacity(b"x" * 100, carrier)
        with pytest.raises(DataTooLargeError):
            ensure_capacity(b"x" * 101, carrier)


class TestStegoCapacity:
    """Steganographic capacity follows the grid size."""

    def test_one_bit_per_channel(self):
        """Test floor(10*10*3*1/8) - 4."""
        assert max_capacity(StegoCarrier(width=10, height=10)) == 33

    def test_header_rows_excluded(self):
        """Test banner rows carry nothing."""
        assert max_capacity(StegoCarrier(width=10, height=10, header_rows=2)) == 26

    def test_two_bits_per_channel(self):
        """Test floor(10*10*3*2/8) - 4."""
        assert max_capacity(StegoCarrier(width=10, height=10, bits_per_channel=2)) == 71

    def test_tiny_carrier_clamped_to_zero(self):
        """Test a grid smaller than the length prefix."""
        assert max_capacity(StegoCarrier(width=1, height=1)) == 0

    def test_exact_boundary(self):
        """Test capacity passes and capacity + 1 fails."""
        carrier = StegoCarrier(width=10, height=10)
        ensure_capacity(b"\x00" * 33, carrier)
        with pytest.raises(DataTooLargeError, match="image"):
            ensure_capacity(b"\x00" * 34, carrier)

    @pytest.mark.parametrize("bits", [1, 2, 4, 8])
    @pytest.mark.parametrize("size", [0, 1, 4, 100, 5000])
    def test_fitting_holds_payload(self, bits, size):
        """Test the planned grid always fits the payload."""
        carrier = StegoCarrier.fitting(size, bits_per_channel=bits, header_rows=5)
        assert max_capacity(carrier) >= size
        assert carrier.header_rows == 5

    def test_fitting_respects_min_width(self):
        """Test the banner width floor."""
        carrier = StegoCarrier.fitting(4, min_width=320)
        assert carrier.width == 320
        assert carrier.height == 1

    def test_fitting_respects_max_width(self):
        """Test the grid grows downwards once max width is reached."""
        carrier = StegoCarrier.fitting(100_000, max_width=64)
        assert carrier.width == 64
        assert max_capacity(carrier) >= 100_000

    def test_fitting_respects_max_height(self):
        """Test the grid widens instead of growing past max_height."""
        max_grid = StegoCarrier(width=1024, height=100, header_rows=48)
        carrier = StegoCarrier.fitting(
            max_capacity(max_grid),
            header_rows=48,
            min_width=320,
            max_width=1024,
            max_height=100,
        )
        assert carrier.width <= 1024
        assert carrier.height <= 100
        assert max_capacity(carrier) >= max_capacity(max_grid)

    def test_fitting_small_payload_ignores_max_height(self):
        """Test payloads that already fit keep the square-ish grid."""
        unbounded = StegoCarrier.fitting(500, header_rows=10, min_width=64)
        bounded = StegoCarrier.fitting(500, header_rows=10, min_width=64, max_height=1000)
        assert bounded == unbounded

    def test_rejects_unsupported_density(self):
        """Test bits per channel must tile a byte."""
        with pytest.raises(ValueError):
            StegoCarrier(width=10, height=10, bits_per_channel=3)

    def test_rejects_header_covering_image(self):
        """Test at least one payload row is required."""
        with pytest.raises(ValueError):
            StegoCarrier(width=10, height=10, header_rows=10)


class TestCarrierUnion:
    """The carrier spec is a tagged union."""

    def test_discriminates_qr(self):
        """Test kind='qr' selects QRCarrier."""
        carrier = carrier_adapter.validate_python({"kind": "qr", "capacity_bytes": 10})
        assert isinstance(carrier, QRCarrier)

    def test_discriminates_steganography(self):
        """Test kind='steganography' selects StegoCarrier."""
        carrier = carrier_adapter.validate_python(
            {"kind": "steganography", "width": 8, "height": 8}
        )
        assert isinstance(carrier, StegoCarrier)
        assert max_capacity(carrier) == 20

    def test_unknown_carrier_type(self):
        """Test max_capacity rejects foreign objects."""
        with pytest.raises(TypeError):
            max_capacity(object())
