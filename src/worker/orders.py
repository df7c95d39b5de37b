# src/worker/orders.py
"""
Воркер обработки изменений статуса заказов.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import ValidationError

from src.worker.base import BaseWorker
from src.infra.event_bus import DomainEvent, EventBus
from src.core.orders.errors import OrderStatusMismatchError
from src.core.orders.models import OrderStatusChangedEvent
from src.core.orders.service import OrderChangedService
from src.common.logger import log_info, log_error, log_warning
from src.common.constants import TypeMsg


class OrderChangedWorker(BaseWorker):
    """
    Воркер для событий сервиса заказов.
    Подписывается на order.status_changed и назначает/снимает/завершает доставки.
    """

    def __init__(
        self,
        order_changed_service: Optional[OrderChangedService] = None,
        event_bus: Optional[EventBus] = None,
        routing_key: Optional[str] = None,
    ) -> None:
        super().__init__(event_bus=event_bus)
        if routing_key is None:
            from src.config import settings
            routing_key = settings.rabbitmq.ORDER_CHANGED_ROUTING_KEY
        self._routing_key = routing_key
        self._service = order_changed_service

    @property
    def name(self) -> str:
        return "OrderChangedWorker"

    @property
    def subscriptions(self) -> List[str]:
        return [self._routing_key]

    @property
    def service(self) -> OrderChangedService:
        if self._service is None:
            from src.core.factory import build_order_changed_service
            self._service = build_order_changed_service()
        return self._service

    async def handle_event(self, event: DomainEvent) -> None:
        """Обрабатывает событие изменения статуса заказа."""
        try:
            message = OrderStatusChangedEvent(**event.payload)
        except ValidationError as e:
            await log_error(
                f"Некорректное событие {event.event_type}: {e.error_count()} ошибок валидации",
                extra={"payload": event.payload},
            )
            return

        await log_info(
            f"Заказ {message.order_id}: новый статус {message.status}",
            type_msg=TypeMsg.INFO,
        )

        try:
            await self.service.handle_order_status_changed(message.status, message.order_id)
        except OrderStatusMismatchError as e:
            await log_warning(f"Событие заказа {message.order_id} пропущено: {e}")
        except Exception as e:
            await log_error(f"Не удалось обработать заказ {message.order_id}: {e}")
