"""Configuration package."""

from bill_tracker.config.settings import (
    AppSettings,
    GoogleSheetsSettings,
    NotificationSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GoogleSheetsSettings",
    "NotificationSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
