# src/core/orders/service.py
"""
Обработка изменения статуса заказа.
Статус сверяется с сервисом заказов, затем вызывается соответствующая операция доставки.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from src.common.constants import OrderStatus, TypeMsg
from src.common.logger import log_info, log_warning
from src.core.deliveries.service import AssignmentService, ReleaseService
from src.core.orders.errors import OrderStatusMismatchError
from src.core.orders.gateway import OrderGateway


StatusProcessor = Callable[[str], Awaitable[object]]


class OrderChangedService:
    """Сервис обработки событий изменения статуса заказа."""

    def __init__(
        self,
        gateway: OrderGateway,
        assignment_service: AssignmentService,
        release_service: ReleaseService,
    ) -> None:
        self._gateway = gateway
        self._processors: dict[str, StatusProcessor] = {
            OrderStatus.CREATED.value: assignment_service.assign,
            OrderStatus.CANCELLED.value: release_service.unassign,
            OrderStatus.COMPLETED.value: release_service.complete,
        }

    def get_processor(self, status: str) -> StatusProcessor | None:
        """Возвращает обработчик статуса или None, если статус не обрабатывается."""
        return self._processors.get(status)

    async def handle_order_status_changed(self, status: str, order_id: str) -> None:
        """
        Обрабатывает изменение статуса заказа.

        Args:
            status: Статус из события
            order_id: ID заказа

        Raises:
            OrderStatusMismatchError: Статус в сервисе заказов другой
        """
        order = await self._gateway.get_order_by_id(order_id)

        if order.status != status:
            await log_warning(
                f"Статус заказа {order_id} не совпадает: ожидался {status}, получен {order.status}"
            )
            raise OrderStatusMismatchError(order_id, status, order.status)

        processor = self.get_processor(status)
        if processor is None:
            await log_info(f"Статус {status} заказа {order_id} не обрабатывается", type_msg=TypeMsg.DEBUG)
            return

        await processor(order_id)
