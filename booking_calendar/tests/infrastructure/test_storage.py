"""
Тесты инфраструктуры: сериализация, хранилища ключ-значение, тестовые данные.
"""
import json
from datetime import date

import pytest

from booking_calendar.booking.domain import Booking
from booking_calendar.booking.infrastructure import (
    BookingSerializer,
    ConsoleLogger,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    StaticSampleDataset,
)
from booking_calendar.shared_kernel import ErrorKind, PersistenceError


@pytest.fixture
def bookings():
    return [
        Booking(
            id=2,
            customer_name="AB de Villiers",
            room="102",
            check_in=date(2025, 5, 2),
            check_out=date(2025, 5, 5),
            transaction_id="TXN002",
        ),
        Booking(
            id="ext-1",
            customer_name="Steve Smith",
            room=None,
            check_in=date(2025, 5, 1),
            check_out=date(2025, 5, 3),
            base_amount=1500,
        ),
    ]


class TestBookingSerializer:
    def test_round_trip_preserves_order_and_values(self, bookings):
        restored = BookingSerializer.loads(BookingSerializer.dumps(bookings))
        assert restored == bookings

    def test_dumps_writes_json_array_with_iso_dates(self, bookings):
        records = json.loads(BookingSerializer.dumps(bookings))

        assert [r["id"] for r in records] == [2, "ext-1"]
        assert records[0]["check_in"] == "2025-05-02"
        assert records[1]["room"] is None

    @pytest.mark.parametrize("text", ["", "{not json", '{"id": 1}', '[{"id": 1}]'])
    def test_loads_rejects_malformed_text(self, text):
        with pytest.raises(PersistenceError) as exc_info:
            BookingSerializer.loads(text)
        assert exc_info.value.kind == ErrorKind.PERSISTENCE

    def test_from_records_rejects_invalid_records(self):
        with pytest.raises(PersistenceError):
            BookingSerializer.from_records([{"id": 1, "check_in": "soon"}])


class TestKeyValueStores:
    def test_in_memory_store(self):
        kv = InMemoryKeyValueStore({"a": "1"})

        assert kv.get("a") == "1"
        assert kv.get("missing") is None

        kv.set("a", "2")
        assert kv.get("a") == "2"

    def test_json_file_store_round_trip(self, tmp_path):
        kv = JsonFileKeyValueStore(str(tmp_path / "data"))

        assert kv.get("bookings") is None

        kv.set("bookings", "[]")

        assert kv.get("bookings") == "[]"
        assert (tmp_path / "data" / "bookings.json").read_text(encoding="utf-8") == "[]"

    def test_json_file_store_write_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        kv = JsonFileKeyValueStore(str(blocker))

        with pytest.raises(PersistenceError):
            kv.set("bookings", "[]")


class TestStaticSampleDataset:
    def test_sample_records_are_valid_bookings(self):
        bookings = BookingSerializer.from_records(StaticSampleDataset().load())

        assert len(bookings) == 5
        assert len({b.id for b in bookings}) == 5
        assert any(b.room is None for b in bookings)

    def test_load_returns_copies(self):
        dataset = StaticSampleDataset()
        dataset.load()[0]["customer_name"] = "Changed"

        assert dataset.load()[0]["customer_name"] == "Steve Smith"


class TestConsoleLogger:
    def test_info_goes_to_stdout_with_context(self, capsys):
        ConsoleLogger().info("Booking added", booking_id=1)

        out = capsys.readouterr().out
        assert "[INFO] Booking added" in out
        assert '"booking_id": 1' in out

    def test_errors_and_warnings_go_to_stderr(self, capsys):
        logger = ConsoleLogger()
        logger.error("Boom")
        logger.warning("Careful", day=date(2025, 5, 1))

        err = capsys.readouterr().err
        assert "[ERROR] Boom" in err
        assert "[WARNING] Careful" in err
        assert "2025-05-01" in err
