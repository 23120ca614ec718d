"""
Прикладной слой контекста бронирования.

Содержит хранилище бронирований (BookingStore), которое координирует
валидацию, проверку доступности номеров и сохранение во внешнее хранилище.
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..config import BookingCalendarSettings
from ..shared_kernel import (
    DateRange,
    DomainException,
    InvalidRoomError,
    NotFoundError,
    PersistenceError,
    UnavailableError,
    ValidationError,
    parse_date,
)
from . import interfaces as ports
from .domain import (
    Booking,
    BookingId,
    BookingIdGenerator,
    BookingPolicy,
    RoomAvailability,
    build_occupancy,
)
from .infrastructure import (
    BookingSerializer,
    ConsoleLogger,
    InMemoryKeyValueStore,
    StaticSampleDataset,
)

DateLike = Union[date, str]


class BookingStore:
    """Хранилище бронирований календаря.

    Держит упорядоченный список бронирований и набор номеров. Каждая
    успешная мутация целиком сохраняет список во внешнее хранилище,
    каждая ошибка записывается в поле ``error`` и выбрасывается.
    """

    def __init__(
        self,
        kv_store: Optional[ports.IKeyValueStore] = None,
        sample_dataset: Optional[ports.ISampleDataset] = None,
        logger: Optional[ports.ILogger] = None,
        settings: Optional[BookingCalendarSettings] = None,
    ):
        """Инициализирует хранилище и загружает сохраненные бронирования."""
        self._settings = settings or BookingCalendarSettings()
        self._kv_store = kv_store or InMemoryKeyValueStore()
        self._sample_dataset = sample_dataset or StaticSampleDataset()
        self._logger = logger or ConsoleLogger()
        self._policy = BookingPolicy(list(self._settings.rooms), self._settings.room_type)
        self._ids = BookingIdGenerator()
        self._bookings: List[Booking] = []

        self.loading = False
        self.error: Optional[str] = None
        self.start_date: date = self._settings.start_date
        self.days_to_show: int = self._settings.days_to_show

        self.load_bookings()

    # Состояние

    @property
    def bookings(self) -> List[Booking]:
        """Копия текущего списка бронирований в порядке добавления."""
        return list(self._bookings)

    @property
    def rooms(self) -> List[str]:
        """Набор номеров. Список живой: его изменения сразу учитываются."""
        return self._policy.rooms

    @property
    def end_date(self) -> date:
        """Последняя дата окна календаря (включительно)."""
        return self.start_date + timedelta(days=self.days_to_show - 1)

    @property
    def occupancy(self) -> Dict[str, Dict[date, Union[BookingId, str]]]:
        """Загрузка номеров в текущем окне календаря."""
        return self.room_occupancy(self.start_date, self.days_to_show)

    # Загрузка и сохранение

    def load_bookings(self) -> None:
        """Загружает бронирования из внешнего хранилища или тестовые данные."""
        self.loading = True
        try:
            self.error = None
            bookings = self._read_persisted()
            if bookings is None:
                bookings = BookingSerializer.from_records(self._sample_dataset.load())
                self._bookings = bookings
                self._logger.warning("Loaded sample bookings", count=len(bookings))
                self._persist()
            else:
                self._bookings = bookings
                self._logger.info("Loaded persisted bookings", count=len(bookings))
            self._ids.observe(self._bookings)
        except PersistenceError as e:
            self.error = "Failed to load bookings"
            self._logger.error(self.error, kind=e.kind.value, reason=e.message)
        finally:
            self.loading = False

    def _read_persisted(self) -> Optional[List[Booking]]:
        """Читает сохраненный список. None - если его нет или он поврежден.

        Ошибка чтения хранилища пробрасывается: подменять недоступные
        данные тестовыми нельзя.
        """
        key = self._settings.storage_key
        raw = self._kv_store.get(key)
        if raw is None:
            return None

        try:
            return BookingSerializer.loads(raw)
        except PersistenceError as e:
            self._logger.warning("Stored bookings are unreadable", key=key, reason=e.message)
            return None

    def _persist(self) -> None:
        """Сохраняет весь список. Ошибка записи не откатывает изменения в памяти."""
        try:
            self._kv_store.set(
                self._settings.storage_key, BookingSerializer.dumps(self._bookings)
            )
        except PersistenceError as e:
            self.error = e.message
            self._logger.error(
                "Failed to persist bookings", kind=e.kind.value, reason=e.message
            )

    # Вспомогательные методы

    def _index_of(self, booking_id: BookingId) -> int:
        for index, booking in enumerate(self._bookings):
            if booking.id == booking_id:
                return index
        raise NotFoundError(f"Booking with ID {booking_id} not found")

    def _record_failure(self, error: DomainException, operation: str) -> None:
        self.error = error.message
        self._logger.error(
            f"Error in {operation}: {error.message}", kind=error.kind.value
        )

    @staticmethod
    def _build(candidate: Mapping[str, Any]) -> Booking:
        """Собирает бронирование из уже проверенных данных."""
        try:
            return Booking.model_validate(dict(candidate))
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise ValidationError(f"Invalid value for {field}: {first['msg']}")

    def _ensure_available(
        self,
        room: Optional[str],
        period: DateRange,
        exclude_id: Optional[BookingId] = None,
    ) -> None:
        conflicts = RoomAvailability.find_conflicts(
            self._bookings, room, period.check_in, period.check_out, exclude_id
        )
        self._logger.debug(
            "Availability checked", room=room, check_in=period.check_in,
            check_out=period.check_out, conflicts=[b.id for b in conflicts],
        )
        if conflicts:
            raise UnavailableError(f"Room {room} is not available for the selected dates")

    def _replace(self, index: int, booking: Booking) -> None:
        self._bookings = [
            *self._bookings[:index],
            booking,
            *self._bookings[index + 1:],
        ]

    # Запросы

    def unallocated_bookings(self) -> List[Booking]:
        """Бронирования без номера или с номером вне текущего набора."""
        return [b for b in self._bookings if not self._policy.is_allocated(b)]

    def room_occupancy(
        self, start_date: DateLike, num_days: int
    ) -> Dict[str, Dict[date, Union[BookingId, str]]]:
        """Возвращает загрузку каждого номера на num_days дней начиная со start_date."""
        return build_occupancy(
            self._bookings, self.rooms, parse_date(start_date), num_days
        )

    def check_room_availability(
        self,
        room: str,
        check_in: DateLike,
        check_out: DateLike,
        exclude_id: Optional[BookingId] = None,
    ) -> bool:
        """Проверяет, свободен ли номер на период [check_in, check_out)."""
        start, end = parse_date(check_in), parse_date(check_out)
        available = RoomAvailability.is_room_available(
            self._bookings, room, start, end, exclude_id
        )
        self._logger.debug(
            "Availability checked", room=room, check_in=start, check_out=end,
            available=available,
        )
        return available

    def validate_dates(self, check_in: DateLike, check_out: DateLike) -> None:
        """Выбрасывает ValidationError, если даты некорректны."""
        error = self._policy.validate_dates(check_in, check_out)
        if error is not None:
            raise error

    def set_calendar_window(self, start_date: DateLike, days_to_show: int) -> None:
        """Меняет окно календаря, используемое свойством occupancy."""
        if days_to_show <= 0:
            raise ValidationError("Number of days to show must be positive")
        self.start_date = parse_date(start_date)
        self.days_to_show = days_to_show

    # Мутации

    def add_booking(self, data: Mapping[str, Any]) -> Booking:
        """Создает новое бронирование."""
        try:
            candidate = {
                "transaction_status": self._settings.default_transaction_status,
                "base_amount": self._settings.default_base_amount,
                "tax_amount": self._settings.default_tax_amount,
                "total_amount": self._settings.default_total_amount,
                **data,
                # Поддерживается только один тип номера
                "room_type": self._policy.room_type.value,
            }
            candidate.pop("id", None)

            error = self._policy.validate(candidate)
            if error is not None:
                raise error

            period = DateRange.parse(candidate["check_in"], candidate["check_out"])
            self._ensure_available(candidate["room"], period)

            new_id = self._ids.next_id()
            candidate["id"] = new_id
            candidate.setdefault("transaction_id", f"TXN{new_id + 10:03d}")
            booking = self._build(candidate)

            self._bookings = [*self._bookings, booking]
            self.error = None
            self._persist()

            self._logger.info(
                "Booking added", booking_id=booking.id, room=booking.room,
                nights=booking.period.nights,
            )
            return booking

        except DomainException as e:
            self._record_failure(e, "add_booking")
            raise

    def update_booking(self, booking_id: BookingId, patch: Mapping[str, Any]) -> Booking:
        """Обновляет поля бронирования, сохраняя его позицию в списке."""
        try:
            index = self._index_of(booking_id)
            existing = self._bookings[index]

            # id меняет только хранилище
            candidate = {**existing.to_record(), **patch, "id": existing.id}

            error = self._policy.validate(candidate)
            if error is not None:
                raise error

            period = DateRange.parse(candidate["check_in"], candidate["check_out"])
            self._ensure_available(candidate["room"], period, exclude_id=existing.id)

            updated = self._build(candidate)
            self._replace(index, updated)
            self.error = None
            self._persist()

            self._logger.info("Booking updated", booking_id=updated.id)
            return updated

        except DomainException as e:
            self._record_failure(e, "update_booking")
            raise

    def reassign_room(self, booking_id: BookingId, new_room: str) -> Booking:
        """Переносит бронирование в другой номер на те же даты."""
        try:
            if not self._policy.is_valid_room(new_room):
                raise InvalidRoomError(f"Room {new_room} is not a valid room")

            index = self._index_of(booking_id)
            booking = self._bookings[index]

            self._ensure_available(new_room, booking.period, exclude_id=booking.id)

            updated = booking.model_copy(update={"room": new_room})
            self._replace(index, updated)
            self.error = None
            self._persist()

            self._logger.info(
                "Booking reassigned", booking_id=updated.id,
                from_room=booking.room, to_room=new_room,
            )
            return updated

        except DomainException as e:
            self._record_failure(e, "reassign_room")
            raise

    def update_dates(
        self, booking_id: BookingId, check_in: DateLike, check_out: DateLike
    ) -> Booking:
        """Переносит бронирование на другие даты в том же номере."""
        try:
            index = self._index_of(booking_id)
            booking = self._bookings[index]

            self.validate_dates(check_in, check_out)
            period = DateRange.parse(check_in, check_out)

            # У неразмещенного бронирования нет номера, конфликтовать не с чем
            if self._policy.is_allocated(booking):
                self._ensure_available(booking.room, period, exclude_id=booking.id)

            updated = booking.model_copy(
                update={"check_in": period.check_in, "check_out": period.check_out}
            )
            self._replace(index, updated)
            self.error = None
            self._persist()

            self._logger.info(
                "Booking dates updated", booking_id=updated.id,
                check_in=period.check_in, check_out=period.check_out,
            )
            return updated

        except DomainException as e:
            self._record_failure(e, "update_dates")
            raise

    def delete_booking(self, booking_id: BookingId) -> None:
        """Удаляет бронирование.

        Поведение для неизвестного id задается настройкой
        ``delete_missing_is_error``.
        """
        try:
            index = self._index_of(booking_id)
        except NotFoundError as e:
            if self._settings.delete_missing_is_error:
                self._record_failure(e, "delete_booking")
                raise
            self._logger.warning("Nothing to delete", booking_id=booking_id)
            return

        self._bookings = [*self._bookings[:index], *self._bookings[index + 1:]]
        self.error = None
        self._persist()
        self._logger.info("Booking deleted", booking_id=booking_id)
