"""
Configuration Management for Category Tally

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Carrier geometry (header rows, bits per channel, QR capacity) must be
identical on the exporting and importing side, so it lives in one place.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CodecSettings(BaseSettings):
    """Visual interchange codec configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TALLY_CODEC_",
        extra="ignore"
    )

    # QR carrier. Version 40 at level H holds 1273 byte-mode characters;
    # 954 payload bytes are 1272 base64 characters. Raise together with a
    # lower error-correction level only.
    qr_capacity_bytes: int = Field(
        default=954,
        ge=1,
        description="Maximum compressed payload accepted for a QR export"
    )
    qr_error_correction: str = Field(
        default="H",
        description="QR error-correction level (L, M, Q or H)"
    )
    qr_scale: int = Field(
        default=10,
        ge=1,
        le=40,
        description="Pixels per QR module"
    )
    qr_quiet_zone: int = Field(
        default=4,
        ge=0,
        description="Quiet zone around the symbol, in modules"
    )
    qr_margin: int = Field(
        default=20,
        ge=0,
        description="White margin around the rasterised symbol, in pixels"
    )

    # Steganographic carrier
    stego_bits_per_channel: int = Field(
        default=1,
        description="Payload bits stored in each R, G, B channel value"
    )
    stego_min_width: int = Field(
        default=320,
        ge=8,
        description="Narrowest generated carrier (wide enough for the banner)"
    )
    stego_max_width: int = Field(
        default=1024,
        ge=8,
        description="Widest generated carrier"
    )
    stego_max_height: int = Field(
        default=1024,
        ge=8,
        description="Tallest generated carrier, banner rows included"
    )

    # Banner
    header_height: int = Field(
        default=48,
        ge=0,
        description="Rows reserved for the title/date banner"
    )
    banner_title: str = Field(
        default="CATEGORY TALLY",
        description="Title drawn in the banner"
    )

    # Decompression bound
    max_decompressed_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Largest decompressed payload accepted on import"
    )

    @field_validator('qr_error_correction')
    @classmethod
    def validate_error_correction(cls, v: str) -> str:
        """Only the four standard QR levels exist."""
        level = v.strip().upper()
        if level not in {"L", "M", "Q", "H"}:
            raise ValueError(f"Unknown QR error-correction level: {v}")
        return level

    @field_validator('stego_bits_per_channel')
    @classmethod
    def validate_bits_per_channel(cls, v: int) -> int:
        """Chunks must tile a byte exactly."""
        if v not in {1, 2, 4, 8}:
            raise ValueError("stego_bits_per_channel must be one of 1, 2, 4, 8")
        return v


class StoreSettings(BaseSettings):
    """Local key-value store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TALLY_STORE_",
        extra="ignore"
    )

    path: Path = Field(
        default=Path("tally_store.json"),
        description="JSON file backing the key-value store"
    )
    save_key: str = Field(
        default="SavedCategories",
        min_length=1,
        description="Key under which the category list is stored"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local logs"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def codec(self) -> CodecSettings:
        return CodecSettings()

    @property
    def store(self) -> StoreSettings:
        return StoreSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("codec", "store", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
