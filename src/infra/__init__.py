# src/infra/__init__.py
"""
Инфраструктурный слой.
Работа с внешними сервисами: PostgreSQL, RabbitMQ.
"""

from src.infra.database import DatabaseManager, TransactionRunner, get_db, get_tx_runner
from src.infra.event_bus import EventBus, get_event_bus

__all__ = [
    "DatabaseManager",
    "TransactionRunner",
    "get_db",
    "get_tx_runner",
    "EventBus",
    "get_event_bus",
]
