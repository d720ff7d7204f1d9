"""
Error taxonomy for Bill Tracker.

- ValidationError: bad user input, rejected before any state changes
- NotFoundError: an operation referenced an id that is not in the store
- PersistenceError: load/save against the backing store failed
- NotificationError: permission or delivery failure (never surfaced to the user)
"""

from typing import Iterable, Optional, Union
from uuid import UUID


class BillTrackerError(Exception):
    """Base exception for Bill Tracker."""
    pass


class ValidationError(BillTrackerError):
    """Bill input failed validation. Carries every issue found."""
    
    def __init__(self, issues: Iterable[str]):
        self.issues = list(issues)
        super().__init__("; ".join(self.issues) or "Invalid bill")
    
    @property
    def first_issue(self) -> Optional[str]:
        return self.issues[0] if self.issues else None


class NotFoundError(BillTrackerError):
    """Bill not found in the store."""
    
    def __init__(self, bill_id: Union[UUID, str]):
        self.bill_id = bill_id
        super().__init__(f"Bill not found: {bill_id}")


class PersistenceError(BillTrackerError):
    """Loading or saving bills failed."""
    pass


class NotificationError(BillTrackerError):
    """Notification permission or delivery failed."""
    pass
