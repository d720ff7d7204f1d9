"""Services package."""

from bill_tracker.services.storage import (
    BillPersistenceInterface,
    GoogleSheetsBillPersistence,
    GoogleSheetsClient,
    InMemoryBillPersistence,
    JsonFileBillPersistence,
    create_persistence,
)

__all__ = [
    "BillPersistenceInterface",
    "GoogleSheetsBillPersistence",
    "GoogleSheetsClient",
    "InMemoryBillPersistence",
    "JsonFileBillPersistence",
    "create_persistence",
]
