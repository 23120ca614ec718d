from typing import Any, Dict, Optional

from .api import create_app
from .booking.application import BookingStore
from .booking.infrastructure import ConsoleLogger, InMemoryKeyValueStore, StaticSampleDataset
from .booking.interfaces import IKeyValueStore
from .config import BookingCalendarSettings


def bootstrap_app(
    settings: Optional[BookingCalendarSettings] = None,
    kv_store: Optional[IKeyValueStore] = None,
) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    logger = ConsoleLogger()

    # 1. Хранилище бронирований с внедренными зависимостями
    store = BookingStore(
        kv_store=kv_store or InMemoryKeyValueStore(),
        sample_dataset=StaticSampleDataset(),
        logger=logger,
        settings=settings or BookingCalendarSettings(),
    )

    # 2. HTTP-граница
    app = create_app()

    return {
        "store": store,
        "app": app,
    }
