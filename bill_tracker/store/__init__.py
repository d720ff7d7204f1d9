"""In-memory bill collection."""

from bill_tracker.store.bill_store import BillStore

__all__ = ["BillStore"]
