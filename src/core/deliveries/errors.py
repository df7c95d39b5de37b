# src/core/deliveries/errors.py
"""
Исключения назначения и снятия доставок.
"""

from __future__ import annotations

from src.core.couriers.errors import CourierServiceError


class NoOrderIDError(CourierServiceError):
    """Не передан ID заказа."""

    def __init__(self) -> None:
        super().__init__("Не указан order_id")


class OrderIDExistsError(CourierServiceError):
    """Заказ уже назначен курьеру."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Заказ {order_id} уже назначен")


class OrderIDNotFoundError(CourierServiceError):
    """Доставка для заказа не найдена."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Доставка для заказа {order_id} не найдена")


class OrderNotFoundError(CourierServiceError):
    """Заказ не найден."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Заказ {order_id} не найден")
