"""
Инфраструктурный слой контекста бронирования.

Содержит реализации хранилищ, источник тестовых данных, сериализацию
списка бронирований и логгер.
"""
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..shared_kernel import PersistenceError
from . import interfaces as ports
from .domain import Booking

_bookings_adapter = TypeAdapter(List[Booking])


class BookingSerializer:
    """Сериализация списка бронирований в JSON-массив и обратно."""

    @staticmethod
    def dumps(bookings: List[Booking]) -> str:
        return _bookings_adapter.dump_json(bookings).decode("utf-8")

    @staticmethod
    def loads(text: str) -> List[Booking]:
        try:
            return _bookings_adapter.validate_json(text)
        except PydanticValidationError as e:
            raise PersistenceError(f"Failed to parse stored bookings: {e.error_count()} error(s)")

    @staticmethod
    def from_records(records: List[Dict[str, Any]]) -> List[Booking]:
        try:
            return _bookings_adapter.validate_python(records)
        except PydanticValidationError as e:
            raise PersistenceError(f"Invalid booking records: {e.error_count()} error(s)")


class InMemoryKeyValueStore(ports.IKeyValueStore):
    """Реализация хранилища ключ-значение в памяти."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore(ports.IKeyValueStore):
    """Хранилище ключ-значение, где каждый ключ - отдельный JSON-файл."""

    def __init__(self, directory: str):
        """
        Инициализирует хранилище.

        Args:
            directory: Каталог, в котором лежат файлы ключей
        """
        self._directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}")

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            # Создаем директорию, если она не существует
            self._directory.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(value)
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}")


class StaticSampleDataset(ports.ISampleDataset):
    """Встроенный набор бронирований для первого запуска."""

    SAMPLE_BOOKINGS: List[Dict[str, Any]] = [
        {
            "id": 1,
            "customer_name": "Steve Smith",
            "room": "101",
            "room_type": "deluxe",
            "check_in": "2025-05-01",
            "check_out": "2025-05-03",
            "transaction_id": "TXN001",
            "transaction_status": "completed",
            "base_amount": 2000,
            "tax_amount": 200,
            "total_amount": 2200,
        },
        {
            "id": 2,
            "customer_name": "AB de Villiers",
            "room": "102",
            "room_type": "deluxe",
            "check_in": "2025-05-02",
            "check_out": "2025-05-05",
            "transaction_id": "TXN002",
            "transaction_status": "completed",
            "base_amount": 3000,
            "tax_amount": 300,
            "total_amount": 3300,
        },
        {
            "id": 3,
            "customer_name": "Kane Williamson",
            "room": "103",
            "room_type": "deluxe",
            "check_in": "2025-05-04",
            "check_out": "2025-05-08",
            "transaction_id": "TXN003",
            "transaction_status": "completed",
            "base_amount": 4000,
            "tax_amount": 400,
            "total_amount": 4400,
        },
        {
            "id": 4,
            "customer_name": "Joe Root",
            "room": "101",
            "room_type": "deluxe",
            "check_in": "2025-05-05",
            "check_out": "2025-05-07",
            "transaction_id": "TXN004",
            "transaction_status": "pending",
            "base_amount": 2000,
            "tax_amount": 200,
            "total_amount": 2200,
        },
        {
            "id": 5,
            "customer_name": "Virat Kohli",
            "room": None,
            "room_type": "deluxe",
            "check_in": "2025-05-06",
            "check_out": "2025-05-09",
            "transaction_id": "TXN005",
            "transaction_status": "completed",
            "base_amount": 3000,
            "tax_amount": 300,
            "total_amount": 3300,
        },
    ]

    def load(self) -> List[Dict[str, Any]]:
        # Копии, чтобы изменения не затрагивали встроенные данные
        return [dict(record) for record in self.SAMPLE_BOOKINGS]


class ConsoleLogger(ports.ILogger):
    """Простая реализация логгера, выводящая сообщения в консоль."""

    def info(self, message: str, **kwargs) -> None:
        print(f"[INFO] {message}", flush=True)
        if kwargs:
            print("  Context:", json.dumps(kwargs, default=str, indent=2), flush=True)

    def error(self, message: str, **kwargs) -> None:
        print(f"[ERROR] {message}", file=sys.stderr, flush=True)
        if kwargs:
            print("  Context:", json.dumps(kwargs, default=str, indent=2), file=sys.stderr, flush=True)

    def warning(self, message: str, **kwargs) -> None:
        print(f"[WARNING] {message}", file=sys.stderr, flush=True)
        if kwargs:
            print("  Context:", json.dumps(kwargs, default=str, indent=2), file=sys.stderr, flush=True)

    def debug(self, message: str, **kwargs) -> None:
        print(f"[DEBUG] {message}", flush=True)
        if kwargs:
            print("  Context:", json.dumps(kwargs, default=str, indent=2), flush=True)
