# src/worker/__init__.py
"""
Фоновые воркеры: события сервиса заказов и освобождение курьеров по дедлайну.
"""

from src.worker.base import BaseWorker, PeriodicWorker
from src.worker.couriers import FreeCouriersWorker
from src.worker.orders import OrderChangedWorker

__all__ = ["BaseWorker", "PeriodicWorker", "FreeCouriersWorker", "OrderChangedWorker"]
