"""
Интерфейсы (порты) для контекста бронирования.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IKeyValueStore(Protocol):
    """Внешнее хранилище ключ-значение (аналог localStorage браузера)."""

    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...


class ISampleDataset(Protocol):
    """Источник тестовых данных для первоначального заполнения."""

    def load(self) -> List[Dict[str, Any]]: ...
