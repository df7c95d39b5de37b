# src/core/orders/__init__.py
"""
Домен заказов.
Клиент сервиса заказов и обработка изменений статуса.
"""

from src.core.orders.gateway import OrderGateway
from src.core.orders.models import Order, OrderStatusChangedEvent
from src.core.orders.service import OrderChangedService

__all__ = [
    "Order",
    "OrderStatusChangedEvent",
    "OrderGateway",
    "OrderChangedService",
]
