# src/core/couriers/__init__.py
"""
Домен курьеров.
Модели, репозиторий и сервис для работы с курьерами.
"""

from src.core.couriers.models import Courier, CourierCreateDTO, CourierStateMachine, CourierUpdateDTO
from src.core.couriers.repository import CourierRepository
from src.core.couriers.service import CourierService

__all__ = [
    "Courier",
    "CourierCreateDTO",
    "CourierStateMachine",
    "CourierUpdateDTO",
    "CourierRepository",
    "CourierService",
]
