"""
Formatting helpers for rendering bills.

Anything user-typed that ends up inside HTML must go through
escape_html first; the data model itself stores raw text.
"""

from decimal import Decimal
from typing import Union


_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_html(text: str) -> str:
    """Escape & < > " ' for safe embedding in markup."""
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


def format_money(amount: Union[Decimal, int, float], symbol: str = "$") -> str:
    """Format an amount as currency, e.g. $1,234.50."""
    return f"{symbol}{Decimal(str(amount)):,.2f}"


def format_due_label(days: int) -> str:
    """Relative due label: today, 3d (ahead) or 2d ago."""
    if days == 0:
        return "today"
    if days > 0:
        return f"{days}d"
    return f"{-days}d ago"


def format_count(count: int) -> str:
    return f"{count} bill{'' if count == 1 else 's'}"
