"""
Основные доменные типы и утилиты общего ядра.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, TypeAdapter, model_validator
from pydantic import ValidationError as PydanticValidationError

_date_adapter = TypeAdapter(date)


# Общие перечисления
class RoomType(str, Enum):
    """Типы номеров в отеле. Поддерживается только один."""

    DELUXE = "deluxe"


class ErrorKind(str, Enum):
    """Виды ошибок хранилища бронирований."""

    VALIDATION = "validation"
    INVALID_ROOM = "invalid_room"
    UNAVAILABLE = "unavailable"
    NOT_FOUND = "not_found"
    PERSISTENCE = "persistence"


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainException):
    """Отсутствующее или некорректное поле бронирования."""

    kind = ErrorKind.VALIDATION


class InvalidRoomError(DomainException):
    """Номер не входит в настроенный набор номеров."""

    kind = ErrorKind.INVALID_ROOM


class UnavailableError(DomainException):
    """Номер уже занят на выбранные даты."""

    kind = ErrorKind.UNAVAILABLE


class NotFoundError(DomainException):
    """Бронирование с указанным идентификатором не найдено."""

    kind = ErrorKind.NOT_FOUND


class PersistenceError(DomainException):
    """Ошибка чтения или записи во внешнее хранилище."""

    kind = ErrorKind.PERSISTENCE


def parse_date(value: Any) -> date:
    """Преобразует строку ISO (YYYY-MM-DD) или дату в объект date.

    Даты хранятся без времени, поэтому datetime не принимается.
    """
    if isinstance(value, datetime):
        raise ValidationError("Invalid date format")
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        raise ValidationError("Invalid date format")
    try:
        return _date_adapter.validate_python(value)
    except PydanticValidationError:
        raise ValidationError("Invalid date format")


class DateRange(BaseModel):
    """Полуоткрытый диапазон дат [check_in, check_out)."""

    model_config = {"frozen": True}

    check_in: date
    check_out: date

    @model_validator(mode="after")
    def check_out_after_check_in(self) -> "DateRange":
        if self.check_out <= self.check_in:
            raise ValueError("Check-out date must be after check-in date")
        return self

    @property
    def nights(self) -> int:
        """Количество ночей в бронировании."""
        return (self.check_out - self.check_in).days

    @classmethod
    def parse(cls, check_in: Any, check_out: Any) -> "DateRange":
        """Создает диапазон из строк или дат, ошибки приводятся к ValidationError."""
        start = parse_date(check_in)
        end = parse_date(check_out)
        if end <= start:
            raise ValidationError("Check-out date must be after check-in date")
        return cls(check_in=start, check_out=end)


def date_span(start: date, num_days: int) -> Iterator[date]:
    """Перебирает num_days последовательных дат, начиная со start."""
    for offset in range(max(num_days, 0)):
        yield start + timedelta(days=offset)

