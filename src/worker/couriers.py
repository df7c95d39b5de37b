# src/worker/couriers.py
"""
Воркер освобождения курьеров с истёкшим дедлайном.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from src.core.couriers.service import CourierService
from src.worker.base import PeriodicWorker


class FreeCouriersWorker(PeriodicWorker):
    """Периодически освобождает курьеров, чья последняя доставка просрочена."""

    def __init__(
        self,
        courier_service: Optional[CourierService] = None,
        interval: Optional[float] = None,
    ) -> None:
        if interval is None:
            from src.config import settings
            interval = settings.couriers.CHECK_FREE_COURIERS_INTERVAL

        super().__init__(interval=interval)
        self._courier_service = courier_service

    @property
    def name(self) -> str:
        return "FreeCouriersWorker"

    @property
    def courier_service(self) -> CourierService:
        # Сервис собирается лениво: пул БД должен быть уже инициализирован
        if self._courier_service is None:
            from src.core.factory import build_courier_service
            self._courier_service = build_courier_service()
        return self._courier_service

    async def run(self, stop_event: asyncio.Event) -> None:
        await self.courier_service.check_free_couriers_with_interval(self.interval, stop_event)
