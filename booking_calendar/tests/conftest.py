"""
Общие фикстуры для тестов календаря бронирований.
"""
import json
from typing import Any, Dict, List, Optional, Tuple

import pytest

from booking_calendar.booking.application import BookingStore
from booking_calendar.booking.infrastructure import InMemoryKeyValueStore
from booking_calendar.config import BookingCalendarSettings
from booking_calendar.shared_kernel import PersistenceError


class RecordingLogger:
    """Логгер, запоминающий сообщения вместо вывода в консоль."""

    def __init__(self):
        self.records: List[Tuple[str, str, Dict[str, Any]]] = []

    def _log(self, level: str, message: str, **kwargs: Any) -> None:
        self.records.append((level, message, kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._log("info", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log("warning", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log("error", message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log("debug", message, **kwargs)

    def levels(self) -> List[str]:
        return [level for level, _, _ in self.records]


class FakeSampleDataset:
    """Источник тестовых данных с заданными записями."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None):
        self.records = records or []
        self.calls = 0

    def load(self) -> List[Dict[str, Any]]:
        self.calls += 1
        return [dict(record) for record in self.records]


class FailingWriteStore(InMemoryKeyValueStore):
    """Хранилище, запись в которое можно сломать."""

    def __init__(self):
        super().__init__()
        self.fail_writes = False

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError("Storage quota exceeded")
        super().set(key, value)


class FailingReadStore(InMemoryKeyValueStore):
    """Хранилище, чтение из которого можно сломать."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_reads = True

    def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise PersistenceError("Storage is not readable")
        return super().get(key)


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def empty_dataset() -> FakeSampleDataset:
    return FakeSampleDataset()


@pytest.fixture
def store(kv_store, empty_dataset, logger) -> BookingStore:
    """Хранилище без тестовых данных с чистым хранилищем ключ-значение."""
    return BookingStore(
        kv_store=kv_store,
        sample_dataset=empty_dataset,
        logger=logger,
        settings=BookingCalendarSettings(),
    )


@pytest.fixture
def booking_data() -> Dict[str, Any]:
    return {
        "customer_name": "Steve Smith",
        "room": "101",
        "check_in": "2025-05-01",
        "check_out": "2025-05-03",
    }


@pytest.fixture
def failing_kv_store() -> FailingWriteStore:
    return FailingWriteStore()


@pytest.fixture
def failing_read_kv_store() -> FailingReadStore:
    """Хранилище с сохраненным бронированием, которое пока нельзя прочитать."""
    record = {
        "id": 99,
        "customer_name": "Stored Guest",
        "room": "104",
        "room_type": "deluxe",
        "check_in": "2025-05-10",
        "check_out": "2025-05-12",
    }
    return FailingReadStore({"bookings": json.dumps([record])})


@pytest.fixture
def make_store(kv_store, logger):
    """Фабрика хранилищ с заданными тестовыми данными и настройками."""

    def _make(records=None, kv=None, **settings) -> BookingStore:
        return BookingStore(
            kv_store=kv if kv is not None else kv_store,
            sample_dataset=FakeSampleDataset(records),
            logger=logger,
            settings=BookingCalendarSettings(**settings),
        )

    return _make
