# src/core/factory.py
"""
Сборка сервисов доменного слоя из инфраструктуры.
"""

from __future__ import annotations

from typing import Optional

from src.core.couriers.repository import CourierRepository
from src.core.couriers.service import CourierService
from src.core.deliveries.repository import DeliveryRepository
from src.core.deliveries.service import AssignmentService, ReleaseService
from src.core.orders.gateway import OrderGateway, get_order_gateway
from src.core.orders.service import OrderChangedService
from src.infra.database import DatabaseManager, get_db, get_tx_runner


def build_courier_service(db: Optional[DatabaseManager] = None) -> CourierService:
    db = db or get_db()
    return CourierService(CourierRepository(db), get_tx_runner())


def build_assignment_service(db: Optional[DatabaseManager] = None) -> AssignmentService:
    db = db or get_db()
    return AssignmentService(CourierRepository(db), DeliveryRepository(db), get_tx_runner())


def build_release_service(db: Optional[DatabaseManager] = None) -> ReleaseService:
    db = db or get_db()
    return ReleaseService(CourierRepository(db), DeliveryRepository(db), get_tx_runner())


def build_order_changed_service(
    gateway: Optional[OrderGateway] = None,
    db: Optional[DatabaseManager] = None,
) -> OrderChangedService:
    """Собирает обработчик статусов заказа со всеми операциями доставки."""
    return OrderChangedService(
        gateway=gateway or get_order_gateway(),
        assignment_service=build_assignment_service(db),
        release_service=build_release_service(db),
    )
