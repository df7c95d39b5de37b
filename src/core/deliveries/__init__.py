# src/core/deliveries/__init__.py
"""
Домен доставок.
Назначение заказов курьерам, снятие назначений, расчёт дедлайнов.
"""

from src.core.deliveries.calculator import DeliveryCalculatorFactory
from src.core.deliveries.models import AssignResult, Delivery, UnassignResult
from src.core.deliveries.repository import DeliveryRepository
from src.core.deliveries.service import AssignmentService, ReleaseService

__all__ = [
    "DeliveryCalculatorFactory",
    "AssignResult",
    "Delivery",
    "UnassignResult",
    "DeliveryRepository",
    "AssignmentService",
    "ReleaseService",
]
