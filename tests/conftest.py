# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import copy
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("COMPONENT_MODE", "all")

from src.common.constants import CourierStatus, TransportType
from src.core.couriers.errors import CourierNotFoundError, StoreError
from src.core.couriers.models import Courier
from src.core.deliveries.errors import OrderIDExistsError, OrderIDNotFoundError
from src.core.deliveries.models import Delivery


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "PROJECT_NAME": "courier_service_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "ENVIRONMENT": "test",
        "COMPONENT_MODE": "api",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "json",
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_MAX_BYTES": 1024,
        "DB_HOST": "db.local",
        "DB_PORT": 5433,
        "DB_NAME": "courier_service_test",
        "DB_USER": "tester",
        "DB_PASSWORD": "secret",
        "DB_MIN_POOL_SIZE": 1,
        "DB_MAX_POOL_SIZE": 5,
        "DB_COMMAND_TIMEOUT": 10,
        "DB_TX_ISOLATION": "repeatable_read",
        "RABBITMQ_HOST": "mq.local",
        "RABBITMQ_PORT": 5673,
        "RABBITMQ_USER": "guest",
        "RABBITMQ_PASSWORD": "guest",
        "RABBITMQ_VHOST": "/",
        "RABBITMQ_EXCHANGE": "orders.test",
        "RABBITMQ_PREFETCH_COUNT": 5,
        "ORDER_CHANGED_ROUTING_KEY": "order.status_changed",
        "API_HOST": "127.0.0.1",
        "API_PORT": 8081,
        "ORDER_SERVICE_URL": "http://orders.local",
        "ORDER_SERVICE_TIMEOUT": 2.5,
        "CHECK_FREE_COURIERS_INTERVAL": 15,
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_db() -> AsyncMock:
    """Мок менеджера базы данных."""
    db = AsyncMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="UPDATE 1")
    db.fetchval = AsyncMock(return_value=None)
    return db


@pytest.fixture
def mock_event_bus() -> AsyncMock:
    """Мок шины событий."""
    event_bus = AsyncMock()
    event_bus.subscribe = AsyncMock(return_value=None)
    event_bus.is_connected = True
    return event_bus


class FakeTransactionRunner:
    """
    TransactionRunner без БД: просто выполняет функцию.
    Считает вызовы, чтобы проверять, что работа шла в транзакции.
    """

    def __init__(self) -> None:
        self.calls = 0

    async def run(self, fn: Callable[[], Awaitable[Any]]) -> Any:
        self.calls += 1
        return await fn()


@pytest.fixture
def tx_runner() -> FakeTransactionRunner:
    """Исполнитель транзакций для тестов сервисов."""
    return FakeTransactionRunner()


# =============================================================================
# ФИКСТУРЫ МОДЕЛЕЙ
# =============================================================================

@pytest.fixture
def sample_courier_data() -> dict[str, Any]:
    """Пример строки курьера из БД."""
    return {
        "id": 1,
        "name": "Иван",
        "phone": "+79990000001",
        "status": "available",
        "transport_type": "car",
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_delivery_data() -> dict[str, Any]:
    """Пример строки доставки из БД."""
    assigned_at = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    return {
        "id": 10,
        "order_id": "order-1",
        "courier_id": 1,
        "assigned_at": assigned_at,
        "deadline": assigned_at.replace(minute=5),
    }


def make_courier(
    courier_id: int = 1,
    status: CourierStatus = CourierStatus.AVAILABLE,
    transport_type: TransportType = TransportType.CAR,
) -> Courier:
    """Создаёт курьера с заданными полями."""
    return Courier(
        id=courier_id,
        name=f"Курьер {courier_id}",
        phone=f"+7999000000{courier_id}",
        status=status,
        transport_type=transport_type,
    )


@pytest.fixture
def courier_factory() -> Callable[..., Courier]:
    """Фабрика курьеров."""
    return make_courier


@pytest.fixture
def mock_courier_repository() -> MagicMock:
    """Мок репозитория курьеров."""
    repo = MagicMock()
    repo.get_courier_by_id = AsyncMock()
    repo.get_all_couriers = AsyncMock(return_value=[])
    repo.create_courier = AsyncMock()
    repo.update_courier = AsyncMock(return_value=None)
    repo.find_available_courier = AsyncMock(return_value=None)
    repo.exists_courier_by_phone = AsyncMock(return_value=False)
    repo.get_courier_id_by_order_id = AsyncMock(return_value=None)
    repo.free_couriers_with_interval = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def mock_delivery_repository() -> MagicMock:
    """Мок репозитория доставок."""
    repo = MagicMock()
    repo.create_delivery = AsyncMock(side_effect=lambda delivery: delivery)
    repo.couriers_delivery = AsyncMock()
    repo.delete_delivery = AsyncMock(return_value=None)
    return repo


# =============================================================================
# ХРАНИЛИЩЕ В ПАМЯТИ (ДЛЯ СЦЕНАРИЕВ НАЗНАЧЕНИЯ)
# =============================================================================

class InMemoryStore:
    """
    Таблицы couriers и delivery в памяти.
    Повторяет правила SQL репозиториев: наименьшая загрузка с tie-break по ID,
    уникальный order_id, освобождение по последней доставке.
    """

    def __init__(self) -> None:
        self.couriers: dict[int, Courier] = {}
        self.deliveries: list[Delivery] = []
        self.clock: datetime | None = None
        self.fail_courier_update = False

    def now(self) -> datetime:
        return self.clock or datetime.now(timezone.utc)

    def add_courier(self, courier: Courier) -> Courier:
        self.couriers[courier.id] = courier.model_copy()
        return courier

    def add_delivery(self, delivery: Delivery) -> Delivery:
        self.deliveries.append(delivery.model_copy())
        return delivery

    def load(self, courier_id: int) -> int:
        return sum(1 for d in self.deliveries if d.courier_id == courier_id)

    def statuses(self) -> dict[int, CourierStatus]:
        return {courier_id: c.status for courier_id, c in self.couriers.items()}

    def snapshot(self) -> tuple[dict[int, Courier], list[Delivery]]:
        return copy.deepcopy(self.couriers), copy.deepcopy(self.deliveries)

    def restore(self, state: tuple[dict[int, Courier], list[Delivery]]) -> None:
        self.couriers, self.deliveries = state


class InMemoryCourierRepository:
    """CourierRepository поверх InMemoryStore."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def get_courier_by_id(self, courier_id: int, for_update: bool = False) -> Courier:
        if courier_id not in self._store.couriers:
            raise CourierNotFoundError(courier_id)
        return self._store.couriers[courier_id].model_copy()

    async def get_all_couriers(self) -> list[Courier]:
        return [self._store.couriers[i].model_copy() for i in sorted(self._store.couriers)]

    async def update_courier(self, courier: Courier) -> None:
        if self._store.fail_courier_update:
            raise StoreError(f"Ошибка обновления курьера {courier.id}")
        if courier.id not in self._store.couriers:
            raise CourierNotFoundError(courier.id)
        self._store.couriers[courier.id] = courier.model_copy()

    async def find_available_courier(self) -> Courier | None:
        available = [c for c in self._store.couriers.values() if c.status == CourierStatus.AVAILABLE]
        if not available:
            return None
        chosen = min(available, key=lambda c: (self._store.load(c.id), c.id))
        return chosen.model_copy()

    async def exists_courier_by_phone(self, phone: str) -> bool:
        return any(c.phone == phone for c in self._store.couriers.values())

    async def get_courier_id_by_order_id(self, order_id: str) -> int | None:
        for delivery in self._store.deliveries:
            if delivery.order_id == order_id:
                return delivery.courier_id
        return None

    async def free_couriers_with_interval(self) -> int:
        now = self._store.now()
        freed = 0
        for courier in self._store.couriers.values():
            if courier.status != CourierStatus.BUSY:
                continue
            own = [d for d in self._store.deliveries if d.courier_id == courier.id]
            if not own:
                continue
            latest = max(own, key=lambda d: d.assigned_at)
            if latest.deadline < now:
                courier.status = CourierStatus.AVAILABLE
                freed += 1
        return freed


class InMemoryDeliveryRepository:
    """DeliveryRepository поверх InMemoryStore."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self._next_id = 1

    async def create_delivery(self, delivery: Delivery) -> Delivery:
        if any(d.order_id == delivery.order_id for d in self._store.deliveries):
            raise OrderIDExistsError(delivery.order_id)
        saved = delivery.model_copy(update={"id": self._next_id})
        self._next_id += 1
        self._store.deliveries.append(saved)
        return saved.model_copy()

    async def couriers_delivery(self, order_id: str) -> Delivery:
        for delivery in self._store.deliveries:
            if delivery.order_id == order_id:
                return delivery.model_copy()
        raise OrderIDNotFoundError(order_id)

    async def delete_delivery(self, order_id: str) -> None:
        remaining = [d for d in self._store.deliveries if d.order_id != order_id]
        if len(remaining) == len(self._store.deliveries):
            raise OrderIDNotFoundError(order_id)
        self._store.deliveries = remaining


class InMemoryTransactionRunner:
    """Откатывает InMemoryStore к снимку, если функция упала."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.calls = 0
        self.rollbacks = 0

    async def run(self, fn: Callable[[], Awaitable[Any]]) -> Any:
        self.calls += 1
        state = self._store.snapshot()
        try:
            return await fn()
        except Exception:
            self.rollbacks += 1
            self._store.restore(state)
            raise


@pytest.fixture
def store() -> InMemoryStore:
    """Пустое хранилище в памяти."""
    return InMemoryStore()


@pytest.fixture
def store_tx_runner(store: InMemoryStore) -> InMemoryTransactionRunner:
    return InMemoryTransactionRunner(store)


@pytest.fixture
def store_courier_repository(store: InMemoryStore) -> InMemoryCourierRepository:
    return InMemoryCourierRepository(store)


@pytest.fixture
def store_delivery_repository(store: InMemoryStore) -> InMemoryDeliveryRepository:
    return InMemoryDeliveryRepository(store)
