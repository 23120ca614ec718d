"""
Модуль контекста бронирования (Booking Context).

Отвечает за управление бронированием номеров в отеле, включая:
- Создание, изменение и удаление бронирований
- Перенос бронирований между номерами и датами
- Проверку доступности номеров и расчет их загрузки
"""

from . import domain, application, infrastructure, interfaces

__all__ = [
    'domain',
    'application',
    'infrastructure',
    'interfaces',
]
