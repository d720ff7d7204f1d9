"""
In-memory Bill Store

DESIGN DECISION: The store is the single owner of the bill collection.
Views, classification and reminders receive the bills as arguments and
never reach into the store themselves.

Bills are frozen models; every mutation builds a replacement record and
swaps it in. This is what makes "pay a recurring bill" one atomic
transition: the replacement already carries the next due date and
paid=False, so paid=True is never stored for a recurring bill.

Ordering is insertion order. Editing a bill keeps its position.
"""

from typing import Any, Iterable, Mapping, Optional, Union
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from bill_tracker.core.dates import next_occurrence
from bill_tracker.errors import NotFoundError, ValidationError
from bill_tracker.log import get_logger
from bill_tracker.models.bill import Bill, BillInput, utcnow


logger = get_logger(__name__)

BillId = Union[UUID, str]


def _coerce_id(bill_id: BillId) -> Optional[UUID]:
    if isinstance(bill_id, UUID):
        return bill_id
    try:
        return UUID(str(bill_id))
    except ValueError:
        return None


def _validation_issues(error: PydanticValidationError) -> list[str]:
    """Turn pydantic errors into the plain messages shown to the user."""
    issues = []
    for err in error.errors():
        cause = err.get("ctx", {}).get("error")
        if cause is not None:
            issues.append(str(cause))
        else:
            field = ".".join(str(part) for part in err.get("loc", ()))
            issues.append(f"{field}: {err['msg']}" if field else err["msg"])
    return issues


class BillStore:
    """
    Owns the bill collection for the lifetime of the process.

    Operations:
    - upsert: create or edit a bill from form fields
    - delete: remove a bill (idempotent)
    - toggle_paid: pay / unpay, rolling recurring bills forward
    - get / get_all: lookups
    """

    def __init__(self, bills: Optional[Iterable[Bill]] = None):
        self._bills: dict[UUID, Bill] = {}
        if bills is not None:
            self.replace_all(bills)

    def __len__(self) -> int:
        return len(self._bills)

    def __contains__(self, bill_id: object) -> bool:
        if not isinstance(bill_id, (UUID, str)):
            return False
        key = _coerce_id(bill_id)
        return key is not None and key in self._bills

    def get(self, bill_id: BillId) -> Optional[Bill]:
        """Look up a bill by id."""
        key = _coerce_id(bill_id)
        if key is None:
            return None
        return self._bills.get(key)

    def get_all(self) -> list[Bill]:
        """All bills in insertion order."""
        return list(self._bills.values())

    def replace_all(self, bills: Iterable[Bill]) -> None:
        """
        Replace the whole collection (used after loading from storage).

        Duplicate ids keep the first record seen.
        """
        collection: dict[UUID, Bill] = {}
        for bill in bills:
            if bill.id in collection:
                logger.warning("duplicate_bill_id_dropped", bill_id=str(bill.id))
                continue
            collection[bill.id] = bill
        self._bills = collection

    def upsert(self, fields: Union[BillInput, Mapping[str, Any]]) -> Bill:
        """
        Create or edit a bill.

        With no id (or an id not in the store) a new bill is inserted,
        unpaid. With an existing id every field except id, created_at and
        paid is replaced.

        Raises:
            ValidationError: name empty, amount <= 0 or bad due date.
                             The store is left untouched.
        """
        if isinstance(fields, BillInput):
            data = fields
        else:
            try:
                data = BillInput.model_validate(dict(fields))
            except PydanticValidationError as e:
                issues = _validation_issues(e)
                logger.info("bill_validation_failed", issues=issues)
                raise ValidationError(issues) from e

        now = utcnow()
        existing = self._bills.get(data.id) if data.id is not None else None

        if existing is not None:
            bill = existing.model_copy(update={
                "name": data.name,
                "amount": data.amount,
                "due_date": data.due_date,
                "recurrence": data.recurrence,
                "notes": data.notes,
                "updated_at": max(now, existing.created_at),
            })
            self._bills[bill.id] = bill
            logger.info("bill_updated", bill_id=str(bill.id))
            return bill

        create_kwargs = {} if data.id is None else {"id": data.id}
        bill = Bill(
            **create_kwargs,
            name=data.name,
            amount=data.amount,
            due_date=data.due_date,
            recurrence=data.recurrence,
            notes=data.notes,
            paid=False,
            created_at=now,
            updated_at=now,
        )
        self._bills[bill.id] = bill
        logger.info("bill_created", bill_id=str(bill.id), recurrence=bill.recurrence.value)
        return bill

    def delete(self, bill_id: BillId) -> bool:
        """Remove a bill. Returns False (no error) if it was not there."""
        key = _coerce_id(bill_id)
        if key is None or key not in self._bills:
            return False
        del self._bills[key]
        logger.info("bill_deleted", bill_id=str(key))
        return True

    def toggle_paid(self, bill_id: BillId) -> Bill:
        """
        Flip the paid state of a bill.

        Unpaid one-off bill -> paid. Unpaid recurring bill -> next cycle:
        due date advanced, still unpaid. Paid bill (only possible for
        one-off bills) -> unpaid.

        Raises:
            NotFoundError: no bill with that id
        """
        key = _coerce_id(bill_id)
        existing = self._bills.get(key) if key is not None else None
        if existing is None:
            raise NotFoundError(bill_id)

        updated_at = max(utcnow(), existing.created_at)

        if existing.paid:
            bill = existing.model_copy(update={"paid": False, "updated_at": updated_at})
            event = "bill_marked_unpaid"
        elif existing.is_recurring:
            bill = existing.model_copy(update={
                "paid": False,
                "due_date": next_occurrence(existing.due_date, existing.recurrence),
                "updated_at": updated_at,
            })
            event = "bill_rolled_to_next_cycle"
        else:
            bill = existing.model_copy(update={"paid": True, "updated_at": updated_at})
            event = "bill_marked_paid"

        self._bills[bill.id] = bill
        logger.info(event, bill_id=str(bill.id), due_date=bill.due_date.isoformat())
        return bill
