"""Tests for the JSON and in-memory stores."""

import json

import pytest

from finance_core.exceptions import PersistenceError
from finance_core.storage import JSONStorage, MemoryStorage


class TestJSONStorage:
    def test_absent_key_loads_none(self, json_storage):
        assert json_storage.load("transactions") is None

    def test_save_then_load(self, json_storage):
        json_storage.save("categories", [{"id": 1, "name": "Salary", "type": "income"}])
        json_storage.save("currency", "NGN")

        assert json_storage.load("categories") == [{"id": 1, "name": "Salary", "type": "income"}]
        assert json_storage.load("currency") == "NGN"
        assert (json_storage.base_path / "currency.json").exists()
        assert not (json_storage.base_path / "currency.json.tmp").exists()

    def test_visible_to_a_new_instance(self, tmp_path):
        JSONStorage(tmp_path).save("transactions", [])
        assert JSONStorage(tmp_path).load("transactions") == []

    def test_non_ascii_is_written_verbatim(self, json_storage):
        json_storage.save("categories", [{"id": 1, "name": "Café", "type": "expense"}])
        text = (json_storage.base_path / "categories.json").read_text(encoding="utf-8")
        assert "Café" in text

    def test_corrupted_file_raises(self, json_storage):
        (json_storage.base_path / "transactions.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(PersistenceError):
            json_storage.load("transactions")

    def test_unserialisable_value_raises(self, json_storage):
        with pytest.raises(PersistenceError):
            json_storage.save("transactions", [object()])

    def test_existing_file_is_overwritten(self, json_storage):
        json_storage.save("currency", "USD")
        json_storage.save("currency", "EUR")
        path = json_storage.base_path / "currency.json"
        assert json.loads(path.read_text(encoding="utf-8")) == "EUR"


class TestMemoryStorage:
    def test_values_are_copied(self):
        storage = MemoryStorage()
        records = [{"id": 1}]
        storage.save("transactions", records)
        records.append({"id": 2})

        loaded = storage.load("transactions")
        loaded.append({"id": 3})

        assert storage.load("transactions") == [{"id": 1}]

    def test_absent_key_loads_none(self):
        assert MemoryStorage().load("currency") is None
