"""
Data Models Package

This package contains all Pydantic models used in Bill Tracker.
"""

from bill_tracker.models.bill import (
    Bill,
    BillInput,
    BillView,
    DueNotification,
    Recurrence,
    StatusFilter,
    Urgency,
    parse_money,
    utcnow,
)

__all__ = [
    "Bill",
    "BillInput",
    "BillView",
    "DueNotification",
    "Recurrence",
    "StatusFilter",
    "Urgency",
    "parse_money",
    "utcnow",
]
