"""
Carrier Capacity Planner

Each carrier kind has one capacity formula:

- QR: a configured constant. The payload is checked against it directly;
  base64 expansion is the QR engine's concern, and a symbol that still
  cannot hold the text fails later with ImageGenerationFailedError.
- Steganography: a function of the pixel grid below the banner rows and
  the bits stored per channel, minus the 4-byte length prefix.

The check always runs on the compressed payload.
"""

import math
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from tally.codec.errors import DataTooLargeError


LENGTH_PREFIX_BYTES = 4

# R, G, B carry payload; alpha never does
PAYLOAD_CHANNELS = 3


class QRCarrier(BaseModel):
    """A QR symbol with a fixed byte budget."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["qr"] = "qr"
    capacity_bytes: int = Field(default=954, ge=1)


class StegoCarrier(BaseModel):
    """A pixel grid whose low channel bits hold the payload."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["steganography"] = "steganography"
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    bits_per_channel: int = Field(default=1)
    header_rows: int = Field(default=0, ge=0)

    @model_validator(mode='after')
    def validate_geometry(self) -> 'StegoCarrier':
        if self.bits_per_channel not in (1, 2, 4, 8):
            raise ValueError("bits_per_channel must be one of 1, 2, 4, 8")
        if self.header_rows >= self.height:
            raise ValueError("Header rows must leave at least one payload row")
        return self

    @property
    def payload_rows(self) -> int:
        return self.height - self.header_rows

    @property
    def bit_capacity(self) -> int:
        """Total embeddable bits, length prefix included."""
        return self.width * self.payload_rows * PAYLOAD_CHANNELS * self.bits_per_channel

    @classmethod
    def fitting(
        cls,
        payload_size: int,
        bits_per_channel: int = 1,
        header_rows: int = 0,
        min_width: int = 1,
        max_width: int = 4096,
        max_height: Optional[int] = None,
    ) -> 'StegoCarrier':
        """
        Smallest roughly-square grid that holds payload_size bytes.

        Width is at least min_width (room for the banner) and at most
        max_width; the height grows to fit. When the rows would exceed
        max_height (banner rows included) the grid widens toward
        max_width instead.
        """
        bits = (payload_size + LENGTH_PREFIX_BYTES) * 8
        bits_per_pixel = PAYLOAD_CHANNELS * bits_per_channel
        pixels = max(1, math.ceil(bits / bits_per_pixel))

        width = max(min_width, math.isqrt(pixels - 1) + 1)
        width = min(width, max_width)
        rows = math.ceil(pixels / width)

        if max_height is not None and header_rows + rows > max_height:
            available_rows = max(1, max_height - header_rows)
            width = min(max_width, max(width, math.ceil(pixels / available_rows)))
            rows = math.ceil(pixels / width)

        return cls(
            width=width,
            height=header_rows + rows,
            bits_per_channel=bits_per_channel,
            header_rows=header_rows,
        )


CarrierSpec = Annotated[
    Union[QRCarrier, StegoCarrier],
    Field(discriminator="kind"),
]

carrier_adapter = TypeAdapter(CarrierSpec)


def max_capacity(carrier: CarrierSpec) -> int:
    """Maximum payload bytes the carrier can transport."""
    if isinstance(carrier, QRCarrier):
        return carrier.capacity_bytes
    if isinstance(carrier, StegoCarrier):
        return max(0, carrier.bit_capacity // 8 - LENGTH_PREFIX_BYTES)
    raise TypeError(f"Unknown carrier type: {type(carrier).__name__}")


def ensure_capacity(payload: bytes, carrier: CarrierSpec) -> None:
    """
    Fail fast when the payload does not fit.

    Raises:
        DataTooLargeError: If len(payload) > max_capacity(carrier)
    """
    capacity = max_capacity(carrier)
    if len(payload) > capacity:
        label = "QR code" if isinstance(carrier, QRCarrier) else "image"
        raise DataTooLargeError(len(payload), capacity, carrier=label)
