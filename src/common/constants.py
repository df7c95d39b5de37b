# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class CourierStatus(str, Enum):
    """Статусы курьера."""
    AVAILABLE = "available"
    BUSY = "busy"


class TransportType(str, Enum):
    """Типы транспорта курьера."""
    ON_FOOT = "on_foot"
    SCOOTER = "scooter"
    CAR = "car"


class OrderStatus(str, Enum):
    """Статусы заказа во внешнем сервисе заказов."""
    CREATED = "created"
    COMPLETED = "completed"
    CANCELLED = "canceled"


# Статус, который возвращается клиенту после снятия назначения
UNASSIGNED_STATUS = "unassigned"
