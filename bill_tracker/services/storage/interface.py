"""
Abstract Persistence Interface

DESIGN DECISION: We define an abstract interface for loading and saving
the bill collection. This allows us to:
1. Keep bills in a local JSON file by default
2. Swap in Google Sheets without touching business logic
3. Use in-memory storage for testing

The interface is intentionally tiny. The BillStore holds the working
collection; persistence only snapshots it in and out.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from bill_tracker.models.bill import Bill


class BillPersistenceInterface(ABC):
    """
    Abstract interface for bill persistence.

    Any storage implementation (JSON file, Google Sheets, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def load(self) -> list[Bill]:
        """
        Load the saved bill collection.

        Returns:
            Bills in saved order; empty if nothing was saved yet

        Raises:
            PersistenceError: If the store cannot be read
        """
        pass

    @abstractmethod
    async def save(self, bills: Iterable[Bill]) -> bool:
        """
        Replace the saved collection with the given bills.

        Returns:
            True if saved successfully

        Raises:
            PersistenceError: If the write fails
        """
        pass


class InMemoryBillPersistence(BillPersistenceInterface):
    """Keeps the saved snapshot in memory. For tests and storage-less runs."""

    def __init__(self, bills: Optional[Iterable[Bill]] = None):
        self._bills: list[Bill] = list(bills or [])
        self.save_count = 0

    async def load(self) -> list[Bill]:
        return list(self._bills)

    async def save(self, bills: Iterable[Bill]) -> bool:
        self._bills = list(bills)
        self.save_count += 1
        return True
