"""
Storage Services Package

Provides the abstract persistence interface and its implementations:
a local JSON file (default), Google Sheets, and in-memory.
"""

from typing import Optional

from bill_tracker.config import Settings, get_settings
from bill_tracker.services.storage.interface import (
    BillPersistenceInterface,
    InMemoryBillPersistence,
)
from bill_tracker.services.storage.json_file import JsonFileBillPersistence
from bill_tracker.services.storage.google_sheets import (
    GoogleSheetsBillPersistence,
    GoogleSheetsClient,
)


def create_persistence(settings: Optional[Settings] = None) -> BillPersistenceInterface:
    """Build the persistence backend selected in configuration."""
    settings = settings or get_settings()
    storage = settings.storage

    if storage.backend == "google_sheets":
        return GoogleSheetsBillPersistence(GoogleSheetsClient(settings.google_sheets))
    if storage.backend == "memory":
        return InMemoryBillPersistence()
    return JsonFileBillPersistence(storage.path, key=storage.key)


__all__ = [
    # Interface
    "BillPersistenceInterface",
    # Implementations
    "GoogleSheetsBillPersistence",
    "GoogleSheetsClient",
    "InMemoryBillPersistence",
    "JsonFileBillPersistence",
    # Factory
    "create_persistence",
]
