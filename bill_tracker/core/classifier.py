"""Due-date urgency classification."""

from typing import Optional

from bill_tracker.core.dates import DateLike, days_until
from bill_tracker.models.bill import Bill, Urgency


# A bill due within this many days (inclusive) is "due soon".
DUE_SOON_DAYS = 7


def classify(bill: Bill, today: Optional[DateLike] = None) -> Urgency:
    """
    Classify a bill relative to today.

    Paid bills are always PAID regardless of their date. Otherwise:
    OVERDUE before today, DUE_SOON from today up to DUE_SOON_DAYS ahead,
    OK after that.
    """
    if bill.paid:
        return Urgency.PAID
    days = days_until(bill.due_date, today)
    if days < 0:
        return Urgency.OVERDUE
    if days <= DUE_SOON_DAYS:
        return Urgency.DUE_SOON
    return Urgency.OK
