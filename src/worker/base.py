# src/worker/base.py
"""
Базовые классы воркеров.
BaseWorker обрабатывает события из RabbitMQ, PeriodicWorker работает по таймеру.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import List, Optional

from src.infra.event_bus import EventBus, DomainEvent, get_event_bus
from src.common.logger import log_info, log_error
from src.common.constants import TypeMsg


class BaseWorker(ABC):
    """
    Базовый класс для воркеров, управляемых событиями.
    Подписывается на события и обрабатывает их.
    """

    def __init__(self, event_bus: Optional[EventBus] = None) -> None:
        """
        Args:
            event_bus: Шина событий
        """
        self.event_bus = event_bus or get_event_bus()
        self._running = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Имя воркера."""
        pass

    @property
    @abstractmethod
    def subscriptions(self) -> List[str]:
        """Список типов событий для подписки."""
        pass

    @abstractmethod
    async def handle_event(self, event: DomainEvent) -> None:
        """
        Обрабатывает событие.

        Args:
            event: Событие из шины
        """
        pass

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Запускает воркер."""
        if self._running:
            return

        self._running = True
        await log_info(f"Воркер {self.name} запускается...", type_msg=TypeMsg.INFO)

        for event_type in self.subscriptions:
            await self.event_bus.subscribe(
                event_type=event_type,
                handler=self._on_event,
            )
            await log_info(
                f"Воркер {self.name} подписан на {event_type}",
                type_msg=TypeMsg.DEBUG,
            )

        await log_info(f"Воркер {self.name} запущен", type_msg=TypeMsg.INFO)

    async def stop(self) -> None:
        """Останавливает воркер."""
        if not self._running:
            return

        self._running = False
        await log_info(f"Воркер {self.name} остановлен", type_msg=TypeMsg.INFO)

    async def _on_event(self, event: DomainEvent) -> None:
        """
        Обработчик события.

        Args:
            event: Событие из шины
        """
        if not self._running:
            return

        try:
            await log_info(
                f"Воркер {self.name} получил событие {event.event_type}",
                type_msg=TypeMsg.DEBUG,
            )
            await self.handle_event(event)
        except Exception as e:
            await log_error(
                f"Ошибка в воркере {self.name}: {e}",
                extra={"event_type": event.event_type, "payload": event.payload},
            )


class PeriodicWorker(ABC):
    """
    Базовый класс для воркеров, работающих по таймеру.
    Цикл выполняется в отдельной задаче до установки stop_event.
    """

    def __init__(self, interval: float) -> None:
        """
        Args:
            interval: Интервал между проходами (секунды)
        """
        self.interval = interval
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Имя воркера."""
        pass

    @abstractmethod
    async def run(self, stop_event: asyncio.Event) -> None:
        """
        Основной цикл воркера. Должен завершиться после установки stop_event.

        Args:
            stop_event: Событие остановки
        """
        pass

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Запускает цикл воркера в фоновой задаче."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(self.run(self._stop_event), name=self.name)
        await log_info(
            f"Воркер {self.name} запущен (интервал {self.interval} сек)",
            type_msg=TypeMsg.INFO,
        )

    async def stop(self) -> None:
        """
        Останавливает воркер.
        Текущий проход завершается, новый не начинается.
        """
        if self._task is None:
            return

        self._stop_event.set()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            await log_error(f"Воркер {self.name} завершился с ошибкой: {e}")
        finally:
            self._task = None

        await log_info(f"Воркер {self.name} остановлен", type_msg=TypeMsg.INFO)
