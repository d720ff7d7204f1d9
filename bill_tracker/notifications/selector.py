"""
Due-bill reminder selection.

Reminders cover unpaid bills due today or overdue by up to
OVERDUE_WINDOW_DAYS. Older overdue bills are left to the list view so
the reminder stays about what needs attention now.
"""

from datetime import date
from typing import Iterable, Optional

from bill_tracker.core.dates import DateLike, days_until, to_date
from bill_tracker.models.bill import Bill, DueNotification
from bill_tracker.presentation import format_money


OVERDUE_WINDOW_DAYS = 3
MAX_NOTIFICATION_ITEMS = 4


def select_due(bills: Iterable[Bill], today: Optional[DateLike] = None) -> list[Bill]:
    """Unpaid bills due today or up to OVERDUE_WINDOW_DAYS overdue, in store order."""
    today = to_date(today) if today is not None else date.today()
    return [
        bill for bill in bills
        if not bill.paid and -OVERDUE_WINDOW_DAYS <= days_until(bill.due_date, today) <= 0
    ]


def format_due_line(bill: Bill, today: Optional[DateLike] = None, currency_symbol: str = "$") -> str:
    """One reminder line: "<name> (<amount>) today" or "... Nd overdue"."""
    days = days_until(bill.due_date, today)
    due_text = "today" if days == 0 else f"{-days}d overdue"
    return f"{bill.name} ({format_money(bill.amount, currency_symbol)}) {due_text}"


def build_due_notification(
    bills: Iterable[Bill],
    today: Optional[DateLike] = None,
    max_items: int = MAX_NOTIFICATION_ITEMS,
    currency_symbol: str = "$",
) -> Optional[DueNotification]:
    """
    Build the reminder for the due bills, or None when nothing is due.

    The title counts every due bill; the body lists only the first
    max_items of them to keep the notification readable.
    """
    today = to_date(today) if today is not None else date.today()
    due = select_due(bills, today)
    if not due:
        return None

    body = "\n".join(
        format_due_line(bill, today, currency_symbol) for bill in due[:max_items]
    )
    return DueNotification(
        title=f"{len(due)} Bill{'s' if len(due) > 1 else ''} Due",
        body=body,
        bill_count=len(due),
    )
