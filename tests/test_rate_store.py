"""
Rate store tests: loading, saving, mutation rules and rollback on failed saves.
"""

import json

import pytest

from fxdesk.core.errors import (
    CurrencyNotFoundError,
    DuplicateCurrencyError,
    ProtectedCurrencyError,
    RatePersistenceError,
)
from fxdesk.services.rates.store import LoadState, RateStore, parse_rate_document


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestLoad:
    def test_load_preserves_file_order(self, store):
        assert store.state is LoadState.LOADED
        assert store.codes() == ["USD", "EUR", "JPY"]
        assert store.get("JPY") == 150.0
        assert store.get("XYZ") is None

    def test_missing_file_degrades_to_empty_failed(self, tmp_path):
        s = RateStore(tmp_path / "absent.json")
        assert s.load() is False
        assert len(s) == 0
        assert s.state is LoadState.FAILED
        assert s.load_failed
        assert s.load_error

    def test_corrupt_json_resets_table(self, rates_path):
        s = RateStore(rates_path)
        assert s.load()
        rates_path.write_text("{not json", encoding="utf-8")
        assert s.load() is False
        assert s.as_dict() == {}
        assert s.state is LoadState.FAILED

    @pytest.mark.parametrize(
        "content",
        ['["USD", 1]', '{"USD": "1"}', '{"USD": 1, "EUR": -2}', '{"USD": true}'],
    )
    def test_non_flat_or_invalid_rates_fail(self, tmp_path, content):
        path = tmp_path / "rates.json"
        path.write_text(content, encoding="utf-8")
        s = RateStore(path)
        assert s.load() is False
        assert s.state is LoadState.FAILED

    def test_empty_object_is_a_successful_load(self, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text("{}", encoding="utf-8")
        s = RateStore(path)
        assert s.load() is True
        assert len(s) == 0
        assert not s.load_failed

    def test_parse_rate_document_converts_ints(self):
        assert parse_rate_document({"USD": 1, "EUR": 0.9}) == {"USD": 1.0, "EUR": 0.9}


class TestMutations:
    def test_set_inserts_and_overwrites(self, store):
        store.set("EUR", 0.95)
        store.set("GBP", 0.8)
        assert store.get("EUR") == 0.95
        assert store.codes()[-1] == "GBP"

    def test_delete_base_always_fails(self, store):
        with pytest.raises(ProtectedCurrencyError):
            store.delete("USD")
        assert "USD" in store

    def test_delete_base_fails_even_when_absent(self, tmp_path):
        s = RateStore(tmp_path / "rates.json")
        with pytest.raises(ProtectedCurrencyError):
            s.delete("USD")

    def test_delete_unknown(self, store):
        with pytest.raises(CurrencyNotFoundError):
            store.delete("XYZ")

    def test_delete_returns_old_rate(self, store):
        assert store.delete("JPY") == 150.0
        assert "JPY" not in store

    def test_add_existing_fails_without_change(self, store, rates_path):
        with pytest.raises(DuplicateCurrencyError):
            store.add_rate("EUR", 2.0)
        assert store.get("EUR") == 0.9
        assert _read(rates_path)["EUR"] == 0.9


class TestPersistence:
    def test_save_round_trip(self, store, rates_path):
        store.update_rate("EUR", 0.93)
        store.add_rate("GBP", 0.79)
        store.remove_rate("JPY")

        reloaded = RateStore(rates_path)
        assert reloaded.load()
        assert reloaded.as_dict() == store.as_dict()
        assert reloaded.codes() == ["USD", "EUR", "GBP"]

    def test_save_writes_indented_json_without_temp_leftovers(self, store, rates_path):
        assert store.save()
        assert rates_path.read_text(encoding="utf-8").startswith('{\n  "USD"')
        assert [p.name for p in rates_path.parent.iterdir()] == [rates_path.name]

    def test_save_failure_reports_false(self, store, monkeypatch):
        def boom(self, payload):
            raise OSError("disk full")

        monkeypatch.setattr(RateStore, "_write", boom)
        assert store.save() is False
        assert store.save_error == "disk full"

    def test_failed_update_rolls_back(self, store, rates_path, monkeypatch):
        def boom(self, payload):
            raise OSError("read-only file system")

        monkeypatch.setattr(RateStore, "_write", boom)
        with pytest.raises(RatePersistenceError):
            store.update_rate("EUR", 5.0)
        with pytest.raises(RatePersistenceError):
            store.add_rate("GBP", 0.79)
        with pytest.raises(RatePersistenceError):
            store.remove_rate("EUR")

        assert store.codes() == ["USD", "EUR", "JPY"]
        assert store.as_dict() == _read(rates_path)

    def test_save_into_missing_directory_fails(self, tmp_path):
        s = RateStore(tmp_path / "missing" / "rates.json")
        s.set("USD", 1.0)
        assert s.save() is False
