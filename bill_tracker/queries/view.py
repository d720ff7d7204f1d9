"""
View composition for the bill list.

DESIGN DECISION: The view is recomputed from scratch on every search or
filter change. It is a pure function of (bills, query, status filter,
today), so the UI never has to keep it in sync.

The visible list keeps store order. Sorting by due date would reorder
rows under the user's cursor as bills are paid and rolled forward.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Union

from bill_tracker.core.classifier import DUE_SOON_DAYS
from bill_tracker.core.dates import DateLike, days_until, to_date
from bill_tracker.models.bill import Bill, BillView, StatusFilter


def matches_query(bill: Bill, query: str) -> bool:
    """Case-insensitive substring match over name and notes."""
    needle = query.lower()
    if not needle:
        return True
    return needle in bill.name.lower() or needle in (bill.notes or "").lower()


def matches_status(bill: Bill, status_filter: StatusFilter, today: Optional[DateLike] = None) -> bool:
    """Whether a bill passes the status filter."""
    if status_filter == StatusFilter.PAID:
        return bill.paid
    if status_filter == StatusFilter.UNPAID:
        return not bill.paid
    if status_filter == StatusFilter.DUE:
        return not bill.paid and 0 <= days_until(bill.due_date, today) <= DUE_SOON_DAYS
    if status_filter == StatusFilter.OVERDUE:
        return not bill.paid and days_until(bill.due_date, today) < 0
    return True


def compute_view(
    bills: Iterable[Bill],
    query: str = "",
    status_filter: Union[StatusFilter, str] = StatusFilter.ALL,
    today: Optional[DateLike] = None,
) -> BillView:
    """
    Filter bills by text and status and total the unpaid amount.

    Args:
        bills: Bills in store order
        query: Free text matched against name and notes
        status_filter: StatusFilter or its string value
        today: Reference date (defaults to date.today())

    Returns:
        BillView with the visible bills, their count, and the total of
        the unpaid ones among them

    Raises:
        ValueError: status_filter is not a known filter value
    """
    status_filter = StatusFilter(status_filter or StatusFilter.ALL)
    today = to_date(today) if today is not None else date.today()

    visible = [
        bill for bill in bills
        if matches_query(bill, query or "") and matches_status(bill, status_filter, today)
    ]
    unpaid_total = sum((bill.amount for bill in visible if not bill.paid), Decimal("0"))

    return BillView(
        visible=visible,
        count=len(visible),
        unpaid_total=unpaid_total,
    )
