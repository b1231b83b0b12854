"""
Main Orchestrator for Category Tally

This module ties the codec pieces together and defines the two
end-to-end flows:
1. Export (dataset -> serialize -> compress -> capacity check -> carrier image -> banner)
2. Import (carrier image -> payload -> decompress -> deserialize -> replace dataset)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The capacity check runs on the compressed payload, before any image work
- Import replaces the whole dataset, and only after every decode step succeeded
- Every call is logged under its own correlation id

Both flows are synchronous, single-shot calls.
"""

from datetime import date
from enum import Enum
from typing import Callable, Optional, Union

from PIL import Image

from tally.audit import EventSinkInterface, InterchangeLogger, create_correlation_id
from tally.codec import (
    BannerRenderer,
    CodecError,
    ImageCodec,
    QRCodec,
    QRScanner,
    SteganographyCodec,
    StegoCarrier,
    compress,
    decompress,
    deserialize,
    ensure_capacity,
    from_image_bytes,
    from_text,
    serialize,
    to_png,
    to_text,
)
from tally.config import CodecSettings, get_settings
from tally.models.audit import InterchangeEventBuilder
from tally.models.category import Category
from tally.store import DataStore, DatasetStorageInterface, JsonFileStorage, StorageError


TEXT_STRATEGY = "text"


class Strategy(str, Enum):
    """Carrier strategies for image interchange."""
    QR = "qr"
    STEGANOGRAPHY = "steganography"


def build_codec(
    strategy: Strategy,
    settings: CodecSettings,
    scanner: Optional[QRScanner] = None,
) -> ImageCodec:
    """Create the codec for a strategy from configuration."""
    if strategy == Strategy.QR:
        return QRCodec(
            capacity_bytes=settings.qr_capacity_bytes,
            error_correction=settings.qr_error_correction,
            scale=settings.qr_scale,
            quiet_zone=settings.qr_quiet_zone,
            margin=settings.qr_margin,
            scanner=scanner,
        )
    if strategy == Strategy.STEGANOGRAPHY:
        return SteganographyCodec(
            bits_per_channel=settings.stego_bits_per_channel,
            header_rows=settings.header_height,
            min_width=settings.stego_min_width,
            max_width=settings.stego_max_width,
            max_height=settings.stego_max_height,
        )
    raise ValueError(f"Unknown strategy: {strategy}")


class ExportFlow:
    """
    Orchestrates dataset export.

    Flow:
    1. Serialize → canonical JSON bytes
    2. Compress → gzip payload
    3. Capacity check → DataTooLargeError before any image work
    4. Encode → carrier image
    5. Banner → title/date header
    """

    def __init__(
        self,
        data_store: DataStore,
        settings: Optional[CodecSettings] = None,
        event_logger: Optional[InterchangeLogger] = None,
    ):
        self._data_store = data_store
        self._settings = settings or get_settings().codec
        self._event_logger = event_logger
        self._banner = BannerRenderer(
            title=self._settings.banner_title,
            height=self._settings.header_height,
        )

    def export_payload(self) -> bytes:
        """Serialized and compressed dataset."""
        return compress(serialize(self._data_store.categories))

    def export_image(
        self,
        strategy: Strategy,
        carrier_image: Optional[Image.Image] = None,
        exported_at: Optional[date] = None,
        with_banner: bool = True,
    ) -> Image.Image:
        """
        Export the whole dataset as a carrier image.

        Args:
            strategy: QR symbol or steganographic bitmap
            carrier_image: Cover image for steganography (generated if omitted)
            exported_at: Date shown in the banner (today if omitted)
            with_banner: Draw the title/date banner

        Raises:
            EncodingFailedError, CompressionFailedError, DataTooLargeError,
            ImageGenerationFailedError
        """
        strategy = Strategy(strategy)
        correlation_id = create_correlation_id()
        self._log(InterchangeEventBuilder.export_started(
            strategy.value,
            len(self._data_store.categories),
            correlation_id,
        ))

        try:
            payload = self.export_payload()
            codec = build_codec(strategy, self._settings)

            if isinstance(codec, SteganographyCodec):
                # A supplied cover image is checked against its own size by the codec
                if carrier_image is None:
                    ensure_capacity(payload, StegoCarrier(
                        width=self._settings.stego_max_width,
                        height=self._settings.stego_max_height,
                        bits_per_channel=self._settings.stego_bits_per_channel,
                        header_rows=self._settings.header_height,
                    ))
                image = codec.encode(payload, carrier_image=carrier_image)
            else:
                ensure_capacity(payload, codec.carrier_for(len(payload)))
                image = codec.encode(payload)

            if with_banner:
                image = codec.add_banner(image, self._banner, exported_at=exported_at)
        except CodecError as e:
            self._log(InterchangeEventBuilder.export_failed(strategy.value, e, correlation_id))
            raise

        self._log(InterchangeEventBuilder.export_completed(
            strategy.value,
            len(payload),
            image.size,
            correlation_id,
        ))
        return image

    def export_png(
        self,
        strategy: Strategy,
        carrier_image: Optional[Image.Image] = None,
        exported_at: Optional[date] = None,
        with_banner: bool = True,
    ) -> bytes:
        """export_image() encoded as PNG bytes."""
        return to_png(self.export_image(
            strategy,
            carrier_image=carrier_image,
            exported_at=exported_at,
            with_banner=with_banner,
        ))

    def export_text(self) -> str:
        """Pretty-printed JSON; no compression, no carrier."""
        correlation_id = create_correlation_id()
        categories = self._data_store.categories
        self._log(InterchangeEventBuilder.export_started(TEXT_STRATEGY, len(categories), correlation_id))
        try:
            text = to_text(categories)
        except CodecError as e:
            self._log(InterchangeEventBuilder.export_failed(TEXT_STRATEGY, e, correlation_id))
            raise
        self._log(InterchangeEventBuilder.export_completed(
            TEXT_STRATEGY,
            len(text.encode("utf-8")),
            None,
            correlation_id,
        ))
        return text

    def _log(self, event) -> None:
        if self._event_logger:
            self._event_logger.log(event)


class ImportFlow:
    """
    Orchestrates dataset import.

    Flow:
    1. Decode → payload bytes (banner rows skipped / scanner output decoded)
    2. Decompress → bounded by max_decompressed_bytes
    3. Deserialize → strict dataset validation
    4. Replace → whole dataset swapped and persisted

    Any failure in steps 1-4 leaves the current dataset exactly as it was.
    """

    def __init__(
        self,
        data_store: DataStore,
        settings: Optional[CodecSettings] = None,
        event_logger: Optional[InterchangeLogger] = None,
        scanner: Optional[QRScanner] = None,
    ):
        self._data_store = data_store
        self._settings = settings or get_settings().codec
        self._event_logger = event_logger
        self._scanner = scanner

    def decode_payload(self, payload: bytes) -> list[Category]:
        """Compressed payload → dataset, without touching the store."""
        raw = decompress(payload, max_size=self._settings.max_decompressed_bytes)
        return deserialize(raw)

    def import_image(
        self,
        image: Image.Image,
        strategy: Strategy,
        scanner: Optional[QRScanner] = None,
    ) -> list[Category]:
        """
        Import a dataset from a carrier image.

        Raises:
            DecodeError: If any decode step fails (dataset unchanged)
            StorageError: If persisting fails (dataset unchanged)
        """
        strategy = Strategy(strategy)
        codec = build_codec(strategy, self._settings, scanner=scanner or self._scanner)
        return self._run(strategy.value, lambda: self.decode_payload(codec.decode(image)))

    def import_png(
        self,
        data: bytes,
        strategy: Strategy,
        scanner: Optional[QRScanner] = None,
    ) -> list[Category]:
        """Import from image file bytes (PNG or any lossless format)."""
        strategy = Strategy(strategy)
        codec = build_codec(strategy, self._settings, scanner=scanner or self._scanner)
        return self._run(
            strategy.value,
            lambda: self.decode_payload(codec.decode(from_image_bytes(data))),
        )

    def import_scanned(self, content: Union[bytes, str]) -> list[Category]:
        """Import the text a QR scanner already read from the symbol."""
        return self._run(
            Strategy.QR.value,
            lambda: self.decode_payload(QRCodec.decode_scanned(content)),
        )

    def import_text(self, text: str) -> list[Category]:
        """Import pretty-printed (or compact) JSON text."""
        return self._run(TEXT_STRATEGY, lambda: from_text(text))

    def _run(
        self,
        strategy: str,
        decode: Callable[[], list[Category]],
    ) -> list[Category]:
        correlation_id = create_correlation_id()
        self._log(InterchangeEventBuilder.import_started(strategy, correlation_id))

        try:
            categories = decode()
            self._data_store.replace_all(categories, correlation_id=correlation_id)
        except (CodecError, StorageError) as e:
            self._log(InterchangeEventBuilder.import_failed(strategy, e, correlation_id))
            raise

        self._log(InterchangeEventBuilder.import_completed(strategy, len(categories), correlation_id))
        return categories

    def _log(self, event) -> None:
        if self._event_logger:
            self._event_logger.log(event)


def create_app_components(
    storage: Optional[DatasetStorageInterface] = None,
    sink: Optional[EventSinkInterface] = None,
    scanner: Optional[QRScanner] = None,
) -> tuple[DataStore, ExportFlow, ImportFlow]:
    """
    Factory function to create all application components.

    Args:
        storage: Dataset storage. Defaults to the configured JSON file.
        sink: Optional event sink; events are always logged locally.
        scanner: QR scanner used when importing QR images.

    Returns:
        (data_store, export_flow, import_flow)
    """
    settings = get_settings()
    event_logger = InterchangeLogger(sink)
    data_store = DataStore(storage or JsonFileStorage(), event_logger=event_logger)

    export_flow = ExportFlow(data_store, settings=settings.codec, event_logger=event_logger)
    import_flow = ImportFlow(
        data_store,
        settings=settings.codec,
        event_logger=event_logger,
        scanner=scanner,
    )
    return data_store, export_flow, import_flow
