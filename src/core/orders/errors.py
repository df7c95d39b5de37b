# src/core/orders/errors.py
"""
Исключения обработки заказов внешнего сервиса.
"""

from __future__ import annotations

from src.core.couriers.errors import CourierServiceError


class OrderGatewayError(CourierServiceError):
    """Сервис заказов недоступен или вернул ошибку."""


class OrderStatusMismatchError(CourierServiceError):
    """Статус заказа в событии не совпадает со статусом в сервисе заказов."""

    def __init__(self, order_id: str, expected: str, actual: str) -> None:
        self.order_id = order_id
        self.expected = expected
        self.actual = actual
        super().__init__(f"Статус заказа {order_id} не совпадает: ожидался {expected}, получен {actual}")
