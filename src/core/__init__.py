# src/core/__init__.py
"""
Доменный слой (Core Domain).
Курьеры, доставки и обработка заказов внешнего сервиса.
"""

from src.core.couriers import Courier, CourierService
from src.core.deliveries import AssignmentService, ReleaseService
from src.core.orders import OrderChangedService, OrderGateway

__all__ = [
    "Courier",
    "CourierService",
    "AssignmentService",
    "ReleaseService",
    "OrderChangedService",
    "OrderGateway",
]
