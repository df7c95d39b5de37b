# src/core/orders/gateway.py
"""
HTTP клиент сервиса заказов.
"""

from __future__ import annotations

from typing import Optional

import httpx

from src.common.logger import log_debug, log_error
from src.core.deliveries.errors import OrderNotFoundError
from src.core.orders.errors import OrderGatewayError
from src.core.orders.models import Order


class OrderGateway:
    """Клиент сервиса заказов."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def close(self) -> None:
        await self.client.aclose()

    async def get_order_by_id(self, order_id: str) -> Order:
        """
        Получает заказ по ID.

        Raises:
            OrderNotFoundError: Сервис заказов ответил 404
            OrderGatewayError: Сетевая ошибка или ошибочный ответ
        """
        await log_debug(f"Запрос заказа {order_id} в сервисе заказов")

        try:
            response = await self.client.get(f"/api/v1/orders/{order_id}")
        except httpx.HTTPError as e:
            await log_error(f"Сервис заказов недоступен: {e}")
            raise OrderGatewayError(f"Сервис заказов недоступен: {e}") from e

        if response.status_code == 404:
            raise OrderNotFoundError(order_id)

        try:
            response.raise_for_status()
            data = response.json()
            if isinstance(data, dict):
                data = data.get("order", data)
            if not isinstance(data, dict):
                raise ValueError(f"ожидался JSON объект, получен {type(data).__name__}")
            return Order(**data)
        except httpx.HTTPStatusError as e:
            await log_error(f"Сервис заказов вернул {response.status_code} для заказа {order_id}")
            raise OrderGatewayError(f"Сервис заказов вернул {response.status_code}") from e
        except ValueError as e:
            # Невалидный JSON или ответ не подходит под модель
            raise OrderGatewayError(f"Некорректный ответ сервиса заказов: {e}") from e


def get_order_gateway() -> OrderGateway:
    """Создаёт OrderGateway с настройками из конфига."""
    from src.config import settings

    return OrderGateway(
        base_url=settings.orders.ORDER_SERVICE_URL,
        timeout=settings.orders.ORDER_SERVICE_TIMEOUT,
    )
