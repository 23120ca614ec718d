"""
Настройки календаря бронирований.
"""

from datetime import date
from typing import List

from pydantic import BaseModel, Field

from .shared_kernel import RoomType


class BookingCalendarSettings(BaseModel):
    """Конфигурация хранилища бронирований и окна календаря."""

    rooms: List[str] = Field(default_factory=lambda: ["101", "102", "103", "104", "105"])
    room_type: RoomType = RoomType.DELUXE
    storage_key: str = "bookings"

    # Платежные значения по умолчанию для новых бронирований
    default_transaction_status: str = "completed"
    default_base_amount: float = 1000
    default_tax_amount: float = 100
    default_total_amount: float = 1100

    # Окно календаря
    start_date: date = date(2025, 5, 1)
    days_to_show: int = Field(14, gt=0)

    # True: удаление несуществующего бронирования - ошибка NotFoundError,
    # False: тихий no-op
    delete_missing_is_error: bool = True
