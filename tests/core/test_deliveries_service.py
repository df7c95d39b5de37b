# tests/core/test_deliveries_service.py
"""
Тесты назначения и снятия доставок.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.common.constants import CourierStatus, TransportType
from src.core.couriers.errors import CourierNotFoundError, CouriersBusyError, UnknownTransportTypeError
from src.core.deliveries.errors import (
    NoOrderIDError,
    OrderIDExistsError,
    OrderIDNotFoundError,
    OrderNotFoundError,
)
from src.core.deliveries.calculator import DeliveryCalculatorFactory
from src.core.deliveries.models import Delivery
from src.core.deliveries.service import AssignmentService, ReleaseService


@pytest.fixture
def assignment_service(mock_courier_repository, mock_delivery_repository, tx_runner) -> AssignmentService:
    return AssignmentService(mock_courier_repository, mock_delivery_repository, tx_runner)


@pytest.fixture
def release_service(mock_courier_repository, mock_delivery_repository, tx_runner) -> ReleaseService:
    return ReleaseService(mock_courier_repository, mock_delivery_repository, tx_runner)


def make_delivery(order_id: str = "order-1", courier_id: int = 1) -> Delivery:
    now = datetime.now(timezone.utc)
    return Delivery(order_id=order_id, courier_id=courier_id, assigned_at=now, deadline=now + timedelta(minutes=5))


class TestAssign:
    """Тесты AssignmentService.assign."""

    @pytest.mark.asyncio
    async def test_empty_order_id_no_io(
        self, assignment_service, mock_courier_repository, mock_delivery_repository, tx_runner
    ) -> None:
        """Пустой order_id отклоняется без обращения к хранилищу."""
        with pytest.raises(NoOrderIDError):
            await assignment_service.assign("")

        assert tx_runner.calls == 0
        mock_courier_repository.find_available_courier.assert_not_awaited()
        mock_delivery_repository.create_delivery.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_all_couriers_busy(
        self, assignment_service, mock_courier_repository, mock_delivery_repository
    ) -> None:
        mock_courier_repository.find_available_courier.return_value = None

        with pytest.raises(CouriersBusyError):
            await assignment_service.assign("order-1")

        mock_delivery_repository.create_delivery.assert_not_awaited()
        mock_courier_repository.update_courier.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "transport_type, minutes",
        [(TransportType.CAR, 5), (TransportType.SCOOTER, 10), (TransportType.ON_FOOT, 15)],
    )
    async def test_assign_sets_deadline_by_transport(
        self,
        assignment_service,
        mock_courier_repository,
        mock_delivery_repository,
        courier_factory,
        tx_runner,
        transport_type,
        minutes,
    ) -> None:
        """Дедлайн равен времени назначения плюс длительность транспорта."""
        # Arrange
        courier = courier_factory(courier_id=4, transport_type=transport_type)
        mock_courier_repository.find_available_courier.return_value = courier

        # Act
        result = await assignment_service.assign("order-1")

        # Assert
        delivery = mock_delivery_repository.create_delivery.call_args[0][0]
        assert delivery.order_id == "order-1"
        assert delivery.courier_id == 4
        assert delivery.deadline - delivery.assigned_at == timedelta(minutes=minutes)
        assert delivery.assigned_at.tzinfo is not None

        assert result.courier_id == 4
        assert result.order_id == "order-1"
        assert result.transport_type is transport_type
        assert result.deadline == delivery.deadline
        assert tx_runner.calls == 1

    @pytest.mark.asyncio
    async def test_assign_marks_courier_busy(
        self, assignment_service, mock_courier_repository, courier_factory
    ) -> None:
        courier = courier_factory()
        mock_courier_repository.find_available_courier.return_value = courier

        await assignment_service.assign("order-1")

        updated = mock_courier_repository.update_courier.call_args[0][0]
        assert updated.id == courier.id
        assert updated.status is CourierStatus.BUSY

    @pytest.mark.asyncio
    async def test_duplicate_order_keeps_courier(
        self, assignment_service, mock_courier_repository, mock_delivery_repository, courier_factory
    ) -> None:
        """Уже назначенный заказ отклоняется, статус курьера не меняется."""
        mock_courier_repository.find_available_courier.return_value = courier_factory()
        mock_delivery_repository.create_delivery.side_effect = OrderIDExistsError("order-1")

        with pytest.raises(OrderIDExistsError):
            await assignment_service.assign("order-1")

        mock_courier_repository.update_courier.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_transport_type(
        self, mock_courier_repository, mock_delivery_repository, tx_runner, courier_factory
    ) -> None:
        """Для транспорта без калькулятора назначение отклоняется."""

        class NoScooters(DeliveryCalculatorFactory):
            DURATIONS = {TransportType.CAR: timedelta(minutes=5)}

        service = AssignmentService(
            mock_courier_repository, mock_delivery_repository, tx_runner, calculator_factory=NoScooters
        )
        mock_courier_repository.find_available_courier.return_value = courier_factory(
            transport_type=TransportType.SCOOTER
        )

        with pytest.raises(UnknownTransportTypeError) as exc_info:
            await service.assign("order-1")

        assert exc_info.value.transport_type == "scooter"
        mock_delivery_repository.create_delivery.assert_not_awaited()


class TestUnassign:
    """Тесты ReleaseService.unassign."""

    @pytest.mark.asyncio
    async def test_empty_order_id(self, release_service, mock_delivery_repository, tx_runner) -> None:
        with pytest.raises(NoOrderIDError):
            await release_service.unassign("")

        assert tx_runner.calls == 0
        mock_delivery_repository.couriers_delivery.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unassign_releases_courier(
        self, release_service, mock_courier_repository, mock_delivery_repository, courier_factory
    ) -> None:
        # Arrange
        mock_delivery_repository.couriers_delivery.return_value = make_delivery(courier_id=2)
        mock_courier_repository.get_courier_by_id.return_value = courier_factory(
            courier_id=2, status=CourierStatus.BUSY
        )

        # Act
        result = await release_service.unassign("order-1")

        # Assert
        assert result.order_id == "order-1"
        assert result.courier_id == 2
        assert result.status == "unassigned"
        mock_delivery_repository.delete_delivery.assert_awaited_once_with("order-1")
        updated = mock_courier_repository.update_courier.call_args[0][0]
        assert updated.status is CourierStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_unassign_already_free_courier(
        self, release_service, mock_courier_repository, mock_delivery_repository, courier_factory
    ) -> None:
        """Курьер уже освобождён по дедлайну: доставка удаляется, статус не трогаем."""
        mock_delivery_repository.couriers_delivery.return_value = make_delivery(courier_id=2)
        mock_courier_repository.get_courier_by_id.return_value = courier_factory(courier_id=2)

        result = await release_service.unassign("order-1")

        assert result.courier_id == 2
        mock_delivery_repository.delete_delivery.assert_awaited_once()
        mock_courier_repository.update_courier.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unassign_unknown_order(
        self, release_service, mock_courier_repository, mock_delivery_repository
    ) -> None:
        mock_delivery_repository.couriers_delivery.side_effect = OrderIDNotFoundError("missing")

        with pytest.raises(OrderIDNotFoundError):
            await release_service.unassign("missing")

        mock_delivery_repository.delete_delivery.assert_not_awaited()
        mock_courier_repository.update_courier.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unassign_concurrent_delete(
        self, release_service, mock_courier_repository, mock_delivery_repository
    ) -> None:
        """Доставку удалили между чтением и удалением: курьер не освобождается."""
        mock_delivery_repository.couriers_delivery.return_value = make_delivery()
        mock_delivery_repository.delete_delivery.side_effect = OrderIDNotFoundError("order-1")

        with pytest.raises(OrderIDNotFoundError):
            await release_service.unassign("order-1")

        mock_courier_repository.get_courier_by_id.assert_not_awaited()
        mock_courier_repository.update_courier.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unassign_missing_courier(
        self, release_service, mock_courier_repository, mock_delivery_repository
    ) -> None:
        mock_delivery_repository.couriers_delivery.return_value = make_delivery(courier_id=9)
        mock_courier_repository.get_courier_by_id.side_effect = CourierNotFoundError(9)

        with pytest.raises(CourierNotFoundError):
            await release_service.unassign("order-1")


class TestComplete:
    """Тесты ReleaseService.complete."""

    @pytest.mark.asyncio
    async def test_empty_order_id(self, release_service, mock_courier_repository, tx_runner) -> None:
        with pytest.raises(NoOrderIDError):
            await release_service.complete("")

        assert tx_runner.calls == 0
        mock_courier_repository.get_courier_id_by_order_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_complete_releases_courier_keeps_delivery(
        self, release_service, mock_courier_repository, mock_delivery_repository, courier_factory, tx_runner
    ) -> None:
        """Курьер освобождается, строка доставки остаётся."""
        mock_courier_repository.get_courier_id_by_order_id.return_value = 3
        mock_courier_repository.get_courier_by_id.return_value = courier_factory(
            courier_id=3, status=CourierStatus.BUSY
        )

        await release_service.complete("order-1")

        mock_courier_repository.get_courier_id_by_order_id.assert_awaited_once_with("order-1")
        updated = mock_courier_repository.update_courier.call_args[0][0]
        assert updated.id == 3
        assert updated.status is CourierStatus.AVAILABLE
        mock_delivery_repository.delete_delivery.assert_not_awaited()
        assert tx_runner.calls == 1

    @pytest.mark.asyncio
    async def test_complete_unknown_order(self, release_service, mock_courier_repository) -> None:
        mock_courier_repository.get_courier_id_by_order_id.return_value = None

        with pytest.raises(OrderNotFoundError):
            await release_service.complete("missing")

        mock_courier_repository.update_courier.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_complete_twice_is_idempotent(
        self, release_service, mock_courier_repository, courier_factory
    ) -> None:
        """Повторное завершение не меняет статус свободного курьера."""
        mock_courier_repository.get_courier_id_by_order_id.return_value = 3
        mock_courier_repository.get_courier_by_id.return_value = courier_factory(courier_id=3)

        await release_service.complete("order-1")

        mock_courier_repository.update_courier.assert_not_awaited()
