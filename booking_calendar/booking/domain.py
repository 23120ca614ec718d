"""
Доменная модель контекста бронирования.

Содержит бронирование, правила валидации, проверку доступности номеров
и расчет загрузки номеров по датам.
"""

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, model_validator

from ..shared_kernel import (
    DateRange,
    DomainException,
    RoomType,
    ValidationError,
    date_span,
)

BookingId = Union[int, str]

# Значение ячейки загрузки для свободной даты
VACANT = "vacant"


class Booking(BaseModel):
    """Бронирование номера в отеле."""

    id: BookingId
    customer_name: str
    room: Optional[str] = None
    room_type: RoomType = RoomType.DELUXE
    check_in: date
    check_out: date
    # Платежные данные не проверяются, только хранятся
    transaction_id: str = ""
    transaction_status: str = "completed"
    base_amount: float = 1000
    tax_amount: float = 100
    total_amount: float = 1100

    @model_validator(mode="after")
    def check_out_after_check_in(self) -> "Booking":
        if self.check_out <= self.check_in:
            raise ValueError("Check-out date must be after check-in date")
        return self

    @property
    def period(self) -> DateRange:
        """Период проживания."""
        return DateRange(check_in=self.check_in, check_out=self.check_out)

    def to_record(self) -> Dict[str, Any]:
        """Возвращает запись в формате хранилища (даты в ISO)."""
        return self.model_dump(mode="json")


class BookingPolicy:
    """Правила валидации бронирований.

    Ошибки возвращаются, а не выбрасываются: вызывающий код сам решает,
    что с ними делать, и различает их по ``kind``.
    """

    def __init__(self, rooms: List[str], room_type: RoomType = RoomType.DELUXE):
        # Список не копируется: набор номеров можно менять во время работы
        self.rooms = rooms
        self.room_type = room_type

    def is_valid_room(self, room: Optional[str]) -> bool:
        return room is not None and room in self.rooms

    def is_allocated(self, booking: Booking) -> bool:
        """Бронирование считается размещенным, если у него есть известный номер."""
        return bool(booking.room) and self.is_valid_room(booking.room)

    def validate_dates(self, check_in: Any, check_out: Any) -> Optional[ValidationError]:
        """Проверяет, что даты корректны и выезд позже заезда."""
        try:
            DateRange.parse(check_in, check_out)
        except ValidationError as e:
            return e
        return None

    def validate(self, candidate: Mapping[str, Any]) -> Optional[DomainException]:
        """Проверяет бронирование целиком и возвращает первую найденную ошибку."""
        name = candidate.get("customer_name")
        if not isinstance(name, str) or not name.strip():
            return ValidationError("Customer name is required")

        if not candidate.get("room"):
            return ValidationError("Room is required")

        if not candidate.get("check_in") or not candidate.get("check_out"):
            return ValidationError("Dates are required")

        date_error = self.validate_dates(candidate["check_in"], candidate["check_out"])
        if date_error is not None:
            return date_error

        if not self.is_valid_room(candidate["room"]):
            return ValidationError("Invalid room number")

        room_type = candidate.get("room_type")
        if isinstance(room_type, RoomType):
            room_type = room_type.value
        if room_type != self.room_type.value:
            return ValidationError(f"Only {self.room_type.value} rooms are supported")

        return None


class RoomAvailability:
    """Проверка доступности номеров.

    Два периода на одном номере конфликтуют, если
    ``a_in < b_out and a_out > b_in``. Заезд в день чужого выезда допустим.
    """

    @staticmethod
    def find_conflicts(
        bookings: Iterable[Booking],
        room: Optional[str],
        check_in: date,
        check_out: date,
        exclude_id: Optional[BookingId] = None,
    ) -> List[Booking]:
        """Возвращает бронирования номера, пересекающиеся с периодом."""
        result = []

        for booking in bookings:
            # Пропускаем редактируемое бронирование
            if exclude_id is not None and booking.id == exclude_id:
                continue

            if (booking.room == room and
                    booking.check_in < check_out and
                    booking.check_out > check_in):
                result.append(booking)

        return result

    @classmethod
    def is_room_available(
        cls,
        bookings: Iterable[Booking],
        room: Optional[str],
        check_in: date,
        check_out: date,
        exclude_id: Optional[BookingId] = None,
    ) -> bool:
        """Проверяет, свободен ли номер на указанные даты."""
        return not cls.find_conflicts(bookings, room, check_in, check_out, exclude_id)


class BookingIdGenerator:
    """Генератор идентификаторов: монотонный счетчик, id не переиспользуются."""

    def __init__(self, last_id: int = 0):
        self._last_id = last_id

    def observe(self, bookings: Iterable[Booking]) -> None:
        """Сдвигает счетчик за максимальный числовой id из переданных бронирований."""
        for booking in bookings:
            if isinstance(booking.id, int) and not isinstance(booking.id, bool):
                self._last_id = max(self._last_id, booking.id)

    def next_id(self) -> int:
        self._last_id += 1
        return self._last_id


def build_occupancy(
    bookings: Sequence[Booking],
    rooms: Sequence[str],
    start: date,
    num_days: int,
) -> Dict[str, Dict[date, Union[BookingId, str]]]:
    """Строит карту загрузки: номер -> дата -> id бронирования или VACANT.

    Дата выезда остается свободной. Инвариант непересечения здесь
    не проверяется: более позднее бронирование перезаписывает раннее.
    """
    occupancy: Dict[str, Dict[date, Union[BookingId, str]]] = {
        room: {day: VACANT for day in date_span(start, num_days)} for room in rooms
    }

    window_end = start + timedelta(days=max(num_days, 0))
    for booking in bookings:
        if booking.room not in occupancy:
            continue
        row = occupancy[booking.room]
        # Только дни, попадающие в окно
        current = max(booking.check_in, start)
        last = min(booking.check_out, window_end)
        while current < last:
            row[current] = booking.id
            current += timedelta(days=1)

    return occupancy
