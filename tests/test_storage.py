"""Tests for persistence backends (JSON file, Google Sheets, in-memory)."""

import asyncio
import json
import pytest
from datetime import date
from unittest.mock import MagicMock
from uuid import uuid4

from bill_tracker.config import Settings
from bill_tracker.errors import PersistenceError
from bill_tracker.models.bill import Bill, Recurrence
from bill_tracker.services.storage import (
    GoogleSheetsBillPersistence,
    InMemoryBillPersistence,
    JsonFileBillPersistence,
    create_persistence,
)
from bill_tracker.services.storage.google_sheets import BILL_COLUMNS


def sample_bills() -> list[Bill]:
    return [
        Bill(
            name="Rent",
            amount="1200.50",
            due_date=date(2024, 6, 1),
            recurrence=Recurrence.MONTHLY,
            notes="landlord",
        ),
        Bill(name="Car tax", amount="180", due_date=date(2024, 9, 12), paid=True),
    ]


class TestJsonFilePersistence:
    """Tests for the JSON file backend."""
    
    def test_save_then_load_round_trip(self, tmp_path):
        """Test that load reproduces what was saved."""
        persistence = JsonFileBillPersistence(tmp_path / "bills.json")
        bills = sample_bills()
        
        assert asyncio.run(persistence.save(bills)) is True
        loaded = asyncio.run(persistence.load())
        
        assert [b.model_dump() for b in loaded] == [b.model_dump() for b in bills]
    
    def test_missing_file_is_empty(self, tmp_path):
        """Test that a first run starts with no bills."""
        persistence = JsonFileBillPersistence(tmp_path / "missing.json")
        assert asyncio.run(persistence.load()) == []
    
    def test_file_layout(self, tmp_path):
        """Test bills are stored under one key with camelCase fields."""
        path = tmp_path / "bills.json"
        persistence = JsonFileBillPersistence(path, key="my_bills")
        asyncio.run(persistence.save(sample_bills()))
        
        document = json.loads(path.read_text(encoding="utf-8"))
        
        assert list(document) == ["my_bills"]
        record = document["my_bills"][0]
        assert record["dueDate"] == "2024-06-01"
        assert record["recurrence"] == "monthly"
        assert "createdAt" in record
    
    def test_save_creates_parent_directories(self, tmp_path):
        """Test saving into a directory that does not exist yet."""
        path = tmp_path / "nested" / "dir" / "bills.json"
        persistence = JsonFileBillPersistence(path)
        assert asyncio.run(persistence.save([])) is True
        assert path.exists()
        assert not path.with_name("bills.json.tmp").exists()
    
    def test_loads_desktop_app_file(self, tmp_path):
        """Test a store written by the desktop app."""
        path = tmp_path / "bills.json"
        bill_id = str(uuid4())
        path.write_text(json.dumps({
            "bills": [{
                "id": bill_id,
                "name": "Netflix",
                "amount": 15.49,
                "dueDate": "2024-06-20",
                "recurrence": "monthly",
                "paid": False,
                "createdAt": "2024-05-20T09:00:00.000Z",
                "updatedAt": "2024-05-20T09:00:00.000Z",
            }]
        }), encoding="utf-8")
        
        loaded = asyncio.run(JsonFileBillPersistence(path).load())
        
        assert len(loaded) == 1
        assert str(loaded[0].id) == bill_id
        assert loaded[0].notes is None
    
    def test_corrupt_file_raises(self, tmp_path):
        """Test that unreadable JSON is a PersistenceError."""
        path = tmp_path / "bills.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(PersistenceError):
            asyncio.run(JsonFileBillPersistence(path).load())
    
    def test_non_utf8_file_raises(self, tmp_path):
        """Test that undecodable bytes are a PersistenceError."""
        path = tmp_path / "bills.json"
        path.write_bytes(b"\xff\xfe{\"bills\": []}\x80")
        with pytest.raises(PersistenceError):
            asyncio.run(JsonFileBillPersistence(path).load())
    
    def test_long_text_survives_load_and_save(self, tmp_path):
        """Test that long names and notes from the desktop app are kept."""
        path = tmp_path / "bills.json"
        record = {
            "id": str(uuid4()),
            "name": "R" * 250,
            "amount": 1200,
            "dueDate": "2024-06-01",
            "recurrence": "monthly",
            "notes": "n" * 1500,
            "paid": False,
            "createdAt": "2024-05-01T09:00:00.000Z",
            "updatedAt": "2024-05-01T09:00:00.000Z",
        }
        path.write_text(json.dumps({"bills": [record]}), encoding="utf-8")
        persistence = JsonFileBillPersistence(path)
        
        loaded = asyncio.run(persistence.load())
        assert len(loaded) == 1
        assert len(loaded[0].notes) == 1500
        
        gas = Bill(name="Gas", amount="60", due_date=date(2024, 6, 15))
        asyncio.run(persistence.save(loaded + [gas]))
        
        document = json.loads(path.read_text(encoding="utf-8"))
        assert [r["name"] for r in document["bills"]] == ["R" * 250, "Gas"]
        assert document["bills"][0]["notes"] == "n" * 1500
    
    def test_wrong_layout_raises(self, tmp_path):
        """Test that a non-object document or non-list value is rejected."""
        path = tmp_path / "bills.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(PersistenceError):
            asyncio.run(JsonFileBillPersistence(path).load())
        
        path.write_text('{"bills": {"a": 1}}', encoding="utf-8")
        with pytest.raises(PersistenceError):
            asyncio.run(JsonFileBillPersistence(path).load())
    
    def test_malformed_records_are_skipped(self, tmp_path):
        """Test that one bad record does not lose the others."""
        path = tmp_path / "bills.json"
        good = sample_bills()[0]
        path.write_text(json.dumps({
            "bills": [
                {"name": "", "dueDate": "nope"},
                good.model_dump(mode="json", by_alias=True),
            ]
        }), encoding="utf-8")
        
        loaded = asyncio.run(JsonFileBillPersistence(path).load())
        
        assert [b.id for b in loaded] == [good.id]


class TestGoogleSheetsPersistence:
    """Tests for the Google Sheets backend against a mocked worksheet."""
    
    def make_persistence(self):
        client = MagicMock()
        sheet = client.get_bills_sheet.return_value
        return GoogleSheetsBillPersistence(client), sheet
    
    def test_save_rewrites_sheet(self):
        """Test that save clears the sheet and writes header plus rows."""
        persistence, sheet = self.make_persistence()
        bills = sample_bills()
        
        assert asyncio.run(persistence.save(bills)) is True
        
        sheet.clear.assert_called_once()
        rows = sheet.append_rows.call_args.args[0]
        assert rows[0] == BILL_COLUMNS
        assert rows[1][0] == str(bills[0].id)
        assert rows[1][2] == "1200.50"
        assert rows[2][6] == "True"
    
    def test_load_parses_rows(self):
        """Test that rows come back as equivalent bills."""
        persistence, sheet = self.make_persistence()
        bills = sample_bills()
        sheet.get_all_values.return_value = (
            [BILL_COLUMNS] + [persistence._bill_to_row(b) for b in bills]
        )
        
        loaded = asyncio.run(persistence.load())
        
        assert [b.model_dump() for b in loaded] == [b.model_dump() for b in bills]
    
    def test_load_skips_empty_and_malformed_rows(self):
        """Test that blank and broken rows are ignored."""
        persistence, sheet = self.make_persistence()
        good = sample_bills()[0]
        sheet.get_all_values.return_value = [
            BILL_COLUMNS,
            [],
            ["", "", ""],
            ["not-a-uuid", "Broken", "10", "2024-06-01"],
            persistence._bill_to_row(good),
        ]
        
        loaded = asyncio.run(persistence.load())
        
        assert [b.id for b in loaded] == [good.id]
    
    def test_load_skips_row_with_unparsable_amount(self):
        """Test that a currency-formatted amount cell only skips its own row."""
        persistence, sheet = self.make_persistence()
        good = sample_bills()[0]
        bad = persistence._bill_to_row(sample_bills()[1])
        bad[2] = "$12.00"
        sheet.get_all_values.return_value = [
            BILL_COLUMNS,
            persistence._bill_to_row(good),
            bad,
        ]
        
        loaded = asyncio.run(persistence.load())
        
        assert [b.id for b in loaded] == [good.id]
    
    def test_load_failure_raises_persistence_error(self):
        """Test that API errors surface as PersistenceError."""
        persistence, sheet = self.make_persistence()
        sheet.get_all_values.side_effect = RuntimeError("quota exceeded")
        with pytest.raises(PersistenceError, match="quota exceeded"):
            asyncio.run(persistence.load())
    
    def test_save_failure_raises_persistence_error(self):
        """Test that write errors surface as PersistenceError."""
        persistence, sheet = self.make_persistence()
        sheet.append_rows.side_effect = RuntimeError("network down")
        with pytest.raises(PersistenceError, match="network down"):
            asyncio.run(persistence.save(sample_bills()))


class TestInMemoryPersistence:
    """Tests for the in-memory backend."""
    
    def test_round_trip(self):
        """Test save/load and the save counter."""
        persistence = InMemoryBillPersistence()
        bills = sample_bills()
        asyncio.run(persistence.save(bills))
        assert asyncio.run(persistence.load()) == bills
        assert persistence.save_count == 1


class TestCreatePersistence:
    """Tests for backend selection from settings."""
    
    def test_default_is_json(self, monkeypatch, tmp_path):
        """Test the JSON backend with a configured path and key."""
        monkeypatch.delenv("BILLS_STORAGE_BACKEND", raising=False)
        monkeypatch.setenv("BILLS_STORAGE_PATH", str(tmp_path / "data.json"))
        monkeypatch.setenv("BILLS_STORAGE_KEY", "records")
        
        persistence = create_persistence(Settings())
        
        assert isinstance(persistence, JsonFileBillPersistence)
        assert persistence.path == tmp_path / "data.json"
    
    def test_memory_backend(self, monkeypatch):
        """Test selecting the in-memory backend."""
        monkeypatch.setenv("BILLS_STORAGE_BACKEND", "memory")
        assert isinstance(create_persistence(Settings()), InMemoryBillPersistence)
    
    def test_google_sheets_backend(self, monkeypatch, tmp_path):
        """Test selecting Google Sheets (no connection is made up front)."""
        credentials = tmp_path / "credentials.json"
        credentials.write_text("{}", encoding="utf-8")
        monkeypatch.setenv("BILLS_STORAGE_BACKEND", "google_sheets")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")
        
        assert isinstance(create_persistence(Settings()), GoogleSheetsBillPersistence)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
