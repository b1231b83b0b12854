"""
Image Codec Interface

DESIGN DECISION: QR and steganography are two implementations of one
interface. Serialization, compression and the capacity check are shared
by the pipeline and run exactly once, whichever carrier is chosen.

Codecs only move payload bytes in and out of pixels; they know nothing
about categories, storage or the UI.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from PIL import Image

from tally.codec.banner import BannerRenderer
from tally.codec.capacity import CarrierSpec


class ImageCodec(ABC):
    """
    Abstract interface for payload <-> carrier image conversion.

    Implementations must satisfy decode(encode(payload)) == payload for
    any payload within max capacity.
    """

    kind: str = ""

    @abstractmethod
    def carrier_for(self, payload_size: int) -> CarrierSpec:
        """
        Describe the carrier the codec would use for a payload.

        The pipeline checks the payload against this before encoding.
        """
        pass

    @abstractmethod
    def encode(self, payload: bytes) -> Image.Image:
        """
        Embed payload bytes in a new RGBA carrier image.

        Raises:
            DataTooLargeError: If the payload does not fit
            ImageGenerationFailedError: If the carrier cannot be built
        """
        pass

    @abstractmethod
    def decode(self, image: Image.Image) -> bytes:
        """
        Recover payload bytes from a carrier image.

        Raises:
            InvalidDataError: If the image is not a recognizable carrier
        """
        pass

    @abstractmethod
    def add_banner(
        self,
        image: Image.Image,
        renderer: BannerRenderer,
        exported_at: Optional[date] = None,
    ) -> Image.Image:
        """
        Return a copy of the carrier with the title/date banner applied.

        The result must still decode to the same payload.
        """
        pass
