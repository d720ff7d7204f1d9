"""Pure date and classification logic."""

from bill_tracker.core.classifier import DUE_SOON_DAYS, classify
from bill_tracker.core.dates import add_months, days_until, next_occurrence, to_date

__all__ = [
    "DUE_SOON_DAYS",
    "add_months",
    "classify",
    "days_until",
    "next_occurrence",
    "to_date",
]
