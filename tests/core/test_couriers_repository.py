# tests/core/test_couriers_repository.py
"""
Тесты репозитория курьеров.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import asyncpg
import pytest

from src.common.constants import CourierStatus, TransportType
from src.core.couriers.errors import CourierNotFoundError, StoreError
from src.core.couriers.models import CourierCreateDTO
from src.core.couriers.repository import CourierRepository


@pytest.fixture
def repository(mock_db: AsyncMock) -> CourierRepository:
    return CourierRepository(mock_db)


class TestGetCourier:
    """Тесты чтения курьеров."""

    @pytest.mark.asyncio
    async def test_get_courier_by_id(self, repository, mock_db, sample_courier_data) -> None:
        mock_db.fetchrow.return_value = sample_courier_data

        courier = await repository.get_courier_by_id(1)

        assert courier.id == 1
        assert courier.transport_type is TransportType.CAR
        assert mock_db.fetchrow.call_args[0][1] == 1
        assert "FOR UPDATE" not in mock_db.fetchrow.call_args[0][0]

    @pytest.mark.asyncio
    async def test_get_courier_for_update(self, repository, mock_db, sample_courier_data) -> None:
        """Внутри изменения строка курьера блокируется."""
        mock_db.fetchrow.return_value = sample_courier_data

        await repository.get_courier_by_id(1, for_update=True)

        assert "FOR UPDATE" in mock_db.fetchrow.call_args[0][0]

    @pytest.mark.asyncio
    async def test_get_courier_not_found(self, repository, mock_db) -> None:
        mock_db.fetchrow.return_value = None

        with pytest.raises(CourierNotFoundError) as exc_info:
            await repository.get_courier_by_id(99)

        assert exc_info.value.courier_id == 99

    @pytest.mark.asyncio
    async def test_get_courier_db_error(self, repository, mock_db) -> None:
        """Ошибка БД оборачивается в StoreError."""
        mock_db.fetchrow.side_effect = asyncpg.PostgresError("connection lost")

        with pytest.raises(StoreError):
            await repository.get_courier_by_id(1)

    @pytest.mark.asyncio
    async def test_get_all_couriers_ordered(self, repository, mock_db, sample_courier_data) -> None:
        second = {**sample_courier_data, "id": 2, "phone": "+79990000002", "status": "busy"}
        mock_db.fetch.return_value = [sample_courier_data, second]

        couriers = await repository.get_all_couriers()

        assert [c.id for c in couriers] == [1, 2]
        assert couriers[1].status is CourierStatus.BUSY
        assert "ORDER BY c.id" in mock_db.fetch.call_args[0][0]

    @pytest.mark.asyncio
    async def test_get_all_couriers_empty(self, repository, mock_db) -> None:
        mock_db.fetch.return_value = []

        assert await repository.get_all_couriers() == []


class TestCreateCourier:
    """Тесты создания курьера."""

    @pytest.mark.asyncio
    async def test_create_courier(self, repository, mock_db, sample_courier_data) -> None:
        mock_db.fetchrow.return_value = sample_courier_data
        dto = CourierCreateDTO(name="Иван", phone="+79990000001", transport_type="car")

        courier = await repository.create_courier(dto)

        assert courier.id == 1
        query, *params = mock_db.fetchrow.call_args[0]
        assert "INSERT INTO couriers" in query
        assert "RETURNING" in query
        assert params == ["Иван", "+79990000001", "available", "car"]

    @pytest.mark.asyncio
    async def test_create_courier_duplicate_phone(self, repository, mock_db) -> None:
        mock_db.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate key")
        dto = CourierCreateDTO(name="Иван", phone="+79990000001", transport_type="car")

        with pytest.raises(StoreError):
            await repository.create_courier(dto)


class TestUpdateCourier:
    """Тесты обновления курьера."""

    @pytest.mark.asyncio
    async def test_update_courier(self, repository, mock_db, courier_factory) -> None:
        courier = courier_factory(courier_id=3, status=CourierStatus.BUSY)
        mock_db.execute.return_value = "UPDATE 1"

        await repository.update_courier(courier)

        query, *params = mock_db.execute.call_args[0]
        assert "updated_at = NOW()" in query
        assert params[0] == 3
        assert params[3] == "busy"

    @pytest.mark.asyncio
    async def test_update_missing_courier(self, repository, mock_db, courier_factory) -> None:
        mock_db.execute.return_value = "UPDATE 0"

        with pytest.raises(CourierNotFoundError):
            await repository.update_courier(courier_factory(courier_id=7))


class TestFindAvailableCourier:
    """Тесты выбора свободного курьера."""

    @pytest.mark.asyncio
    async def test_query_contract(self, repository, mock_db, sample_courier_data) -> None:
        """Наименее загруженный, затем меньший ID, с блокировкой строки."""
        mock_db.fetchrow.return_value = sample_courier_data

        courier = await repository.find_available_courier()

        assert courier is not None and courier.id == 1
        query, status = mock_db.fetchrow.call_args[0]
        assert status == "available"
        assert "COUNT(*)" in query
        assert "c.id ASC" in query
        assert "LIMIT 1" in query
        assert "FOR UPDATE SKIP LOCKED" in query
        assert query.index("COUNT(*)") < query.index("c.id ASC")

    @pytest.mark.asyncio
    async def test_no_available_couriers(self, repository, mock_db) -> None:
        mock_db.fetchrow.return_value = None

        assert await repository.find_available_courier() is None


class TestLookups:
    """Тесты вспомогательных запросов."""

    @pytest.mark.asyncio
    async def test_exists_courier_by_phone(self, repository, mock_db) -> None:
        mock_db.fetchval.return_value = True

        assert await repository.exists_courier_by_phone("+7999") is True
        assert mock_db.fetchval.call_args[0][1] == "+7999"

    @pytest.mark.asyncio
    async def test_get_courier_id_by_order_id(self, repository, mock_db) -> None:
        mock_db.fetchval.return_value = 5

        assert await repository.get_courier_id_by_order_id("order-1") == 5

    @pytest.mark.asyncio
    async def test_get_courier_id_by_unknown_order(self, repository, mock_db) -> None:
        mock_db.fetchval.return_value = None

        assert await repository.get_courier_id_by_order_id("missing") is None


class TestFreeCouriersWithInterval:
    """Тесты освобождения курьеров по дедлайну."""

    @pytest.mark.asyncio
    async def test_returns_freed_count(self, repository, mock_db) -> None:
        mock_db.execute.return_value = "UPDATE 2"

        assert await repository.free_couriers_with_interval() == 2

    @pytest.mark.asyncio
    async def test_only_latest_delivery_considered(self, repository, mock_db) -> None:
        """Сравнивается дедлайн только последней по assigned_at доставки."""
        mock_db.execute.return_value = "UPDATE 0"

        await repository.free_couriers_with_interval()

        query, available, busy = mock_db.execute.call_args[0]
        assert "MAX(d2.assigned_at)" in query
        assert "d.deadline < NOW()" in query
        assert (available, busy) == ("available", "busy")

    @pytest.mark.asyncio
    async def test_db_error(self, repository, mock_db) -> None:
        mock_db.execute.side_effect = asyncpg.PostgresError("boom")

        with pytest.raises(StoreError):
            await repository.free_couriers_with_interval()
