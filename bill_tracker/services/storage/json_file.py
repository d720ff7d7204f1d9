"""
JSON File Storage Implementation

The default backend. Bills are kept in a single JSON document as the
sole value under one key:

    {"bills": [{"id": "...", "name": "Rent", "dueDate": "2024-06-01", ...}]}

Field names are camelCase, matching what the desktop version of the app
wrote, so an existing bills.json can be opened directly. There is no
schema version; new fields must be optional.
"""

import json
import os
from pathlib import Path
from typing import Iterable, Union

from pydantic import ValidationError as PydanticValidationError

from bill_tracker.errors import PersistenceError
from bill_tracker.log import get_logger
from bill_tracker.models.bill import Bill
from bill_tracker.services.storage.interface import BillPersistenceInterface


logger = get_logger(__name__)


class JsonFileBillPersistence(BillPersistenceInterface):
    """
    Local JSON file implementation of bill persistence.

    Writes go to a temporary file first and are moved into place, so a
    crash mid-write never leaves a truncated store behind.
    """

    def __init__(self, path: Union[str, Path] = "bills.json", key: str = "bills"):
        self._path = Path(path)
        self._key = key

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> list[Bill]:
        """Load bills. A missing file is an empty collection."""
        if not self._path.exists():
            return []

        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to read {self._path}: {e}") from e

        if not isinstance(document, dict):
            raise PersistenceError(f"Unexpected store layout in {self._path}")

        records = document.get(self._key) or []
        if not isinstance(records, list):
            raise PersistenceError(f"'{self._key}' in {self._path} is not a list")

        bills = []
        for index, record in enumerate(records):
            try:
                bills.append(Bill.model_validate(record))
            except PydanticValidationError as e:
                # Skip malformed records rather than losing the whole store
                logger.warning(
                    "malformed_bill_skipped",
                    index=index,
                    path=str(self._path),
                    error=str(e),
                )
        return bills

    async def save(self, bills: Iterable[Bill]) -> bool:
        """Write all bills, replacing the previous contents."""
        document = {
            self._key: [bill.model_dump(mode="json", by_alias=True) for bill in bills]
        }
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise PersistenceError(f"Failed to write {self._path}: {e}") from e
        return True
