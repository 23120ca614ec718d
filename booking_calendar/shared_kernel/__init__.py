"""
Общее ядро (Shared Kernel) календаря бронирований.

Содержит общие типы данных, исключения и утилиты для работы с датами.
"""

from .domain import (
    DateRange,
    # Исключения
    DomainException,
    ErrorKind,
    InvalidRoomError,
    NotFoundError,
    PersistenceError,
    # Перечисления
    RoomType,
    UnavailableError,
    ValidationError,
    # Утилиты
    date_span,
    parse_date,
)

__all__ = [
    "DateRange",
    # Перечисления
    "RoomType",
    "ErrorKind",
    # Исключения
    "DomainException",
    "ValidationError",
    "InvalidRoomError",
    "UnavailableError",
    "NotFoundError",
    "PersistenceError",
    # Утилиты
    "parse_date",
    "date_span",
]
