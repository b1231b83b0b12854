"""Configuration package."""

from tally.config.settings import (
    AppSettings,
    CodecSettings,
    Settings,
    StoreSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "CodecSettings",
    "Settings",
    "StoreSettings",
    "get_settings",
    "validate_all_settings",
]
