"""
Core Data Models for Bill Tracker

These models define the schemas for all data flowing through the system.
They are designed to:
1. Enforce the bill invariants at runtime
2. Provide clear validation error messages for the bill form
3. Serialize to the same record shape the desktop app persisted

DESIGN DECISION: Bill is frozen. The BillStore is the only place that
creates replacement records, so nothing outside it can mutate a bill
it got from a lookup.
"""

import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def parse_money(value: Any) -> Decimal:
    """
    Parse a user-supplied amount.

    Anything unparsable (empty, NaN, infinity, garbage) becomes 0 and
    negative values are clamped to 0. Never raises.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not amount.is_finite():
        return Decimal("0")
    return max(amount, Decimal("0"))


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Recurrence(str, Enum):
    """How often a bill comes back after it is paid."""
    NONE = "none"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Urgency(str, Enum):
    """
    Due-date urgency of a bill relative to today.

    PAID wins over any date-based state.
    """
    PAID = "paid"
    OVERDUE = "overdue"
    DUE_SOON = "due-soon"
    OK = "ok"


class StatusFilter(str, Enum):
    """Status filter options for the bill list."""
    ALL = "all"
    DUE = "due"
    OVERDUE = "overdue"
    PAID = "paid"
    UNPAID = "unpaid"


# =============================================================================
# CORE BILL MODEL
# =============================================================================

class Bill(BaseModel):
    """
    A tracked bill.

    Persisted with camelCase keys (dueDate, createdAt, ...) so records
    written by earlier versions of the app load unchanged. Python code
    uses the snake_case attribute names.

    Stored text has no length limit; the form caps live on BillInput.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique bill ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name"
    )
    amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Amount in currency units"
    )
    due_date: date = Field(
        ...,
        description="Due date (no time component)"
    )
    recurrence: Recurrence = Field(
        default=Recurrence.NONE,
        description="Recurrence cadence"
    )
    notes: Optional[str] = Field(
        default=None,
        description="Free-text notes"
    )
    paid: bool = Field(
        default=False,
        description="Paid in the current cycle"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        description="When the bill was created"
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last update timestamp"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def clamp_amount(cls, v: Any) -> Decimal:
        return parse_money(v)

    @field_validator('notes')
    @classmethod
    def empty_notes_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @field_validator('created_at', 'updated_at')
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are treated as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode='after')
    def validate_timestamps(self) -> 'Bill':
        """created_at can never be later than updated_at."""
        if self.updated_at < self.created_at:
            raise ValueError("updated_at cannot be before created_at")
        return self

    @property
    def is_recurring(self) -> bool:
        return self.recurrence != Recurrence.NONE


class BillInput(BaseModel):
    """
    Raw create/edit payload, as it comes from the bill form.

    All form-level checks live here so that invalid input is rejected
    before it ever reaches the store:
    - name must be non-empty after trimming
    - amount is parsed leniently (garbage -> 0) and must then be > 0
    - due date must be yyyy-mm-dd and a real calendar date

    An empty id means "create a new bill".
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: Optional[UUID] = None
    name: str = Field(default="", max_length=200, validate_default=True)
    amount: Decimal = Field(default=Decimal("0"), validate_default=True)
    due_date: Optional[date] = Field(default=None, validate_default=True)
    recurrence: Recurrence = Recurrence.NONE
    notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator('id', mode='before')
    @classmethod
    def blank_id_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('name')
    @classmethod
    def require_name(cls, v: str) -> str:
        if not v:
            raise ValueError("Bill name is required")
        return v

    @field_validator('amount', mode='before')
    @classmethod
    def parse_amount(cls, v: Any) -> Decimal:
        return parse_money(v)

    @field_validator('amount')
    @classmethod
    def require_positive_amount(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        return v

    @field_validator('due_date', mode='before')
    @classmethod
    def parse_due_date(cls, v: Any) -> date:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Due date is required")
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, date):
            return v
        if not isinstance(v, str) or not ISO_DATE_PATTERN.match(v.strip()):
            raise ValueError("Invalid due date format")
        try:
            return date.fromisoformat(v.strip())
        except ValueError:
            raise ValueError("Invalid due date format")

    @field_validator('recurrence', mode='before')
    @classmethod
    def blank_recurrence_to_none(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return Recurrence.NONE
        return v

    @field_validator('notes')
    @classmethod
    def empty_notes_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


# =============================================================================
# DERIVED VIEW MODELS
# =============================================================================

class BillView(BaseModel):
    """
    The filtered bill list plus its aggregates.

    visible keeps store (insertion) order.
    """

    visible: list[Bill] = Field(default_factory=list)
    count: int = Field(default=0, ge=0)
    unpaid_total: Decimal = Field(
        default=Decimal("0"),
        description="Sum of amounts of unpaid visible bills"
    )


class DueNotification(BaseModel):
    """A formatted due-bill reminder, ready to hand to a delivery adapter."""

    title: str
    body: str
    bill_count: int = Field(ge=1, description="Number of due bills (not just the listed ones)")
