# src/core/deliveries/service.py
"""
Назначение заказов курьерам и снятие назначений.
Каждая операция выполняется в одной транзакции через TransactionRunner.
"""

from __future__ import annotations

from datetime import datetime, timezone

from src.common.constants import TypeMsg
from src.common.logger import log_info
from src.core.couriers.errors import CouriersBusyError, UnknownTransportTypeError
from src.core.couriers.repository import CourierRepository
from src.core.deliveries.calculator import DeliveryCalculatorFactory
from src.core.deliveries.errors import NoOrderIDError, OrderNotFoundError
from src.core.deliveries.models import AssignResult, Delivery, UnassignResult
from src.core.deliveries.repository import DeliveryRepository
from src.infra.database import TransactionRunner


class AssignmentService:
    """Назначает заказ наименее загруженному свободному курьеру."""

    def __init__(
        self,
        courier_repository: CourierRepository,
        delivery_repository: DeliveryRepository,
        tx_runner: TransactionRunner,
        calculator_factory: type[DeliveryCalculatorFactory] = DeliveryCalculatorFactory,
    ) -> None:
        self._couriers = courier_repository
        self._deliveries = delivery_repository
        self._tx_runner = tx_runner
        self._calculators = calculator_factory

    async def assign(self, order_id: str) -> AssignResult:
        """
        Назначает заказ курьеру.

        Args:
            order_id: ID заказа

        Returns:
            Курьер, заказ, тип транспорта и дедлайн

        Raises:
            NoOrderIDError: Пустой order_id
            CouriersBusyError: Нет свободных курьеров
            UnknownTransportTypeError: Нет калькулятора для транспорта курьера
            OrderIDExistsError: Заказ уже назначен
        """
        if not order_id:
            raise NoOrderIDError()

        async def _assign() -> AssignResult:
            courier = await self._couriers.find_available_courier()
            if courier is None:
                raise CouriersBusyError()

            now = datetime.now(timezone.utc)
            deadline = self._calculators.calculate_deadline(courier.transport_type, now)
            if deadline is None:
                raise UnknownTransportTypeError(courier.transport_type.value)

            delivery = await self._deliveries.create_delivery(
                Delivery(
                    order_id=order_id,
                    courier_id=courier.id,
                    assigned_at=now,
                    deadline=deadline,
                )
            )

            courier.assign()
            await self._couriers.update_courier(courier)

            return AssignResult(
                courier_id=courier.id,
                order_id=delivery.order_id,
                transport_type=courier.transport_type,
                deadline=delivery.deadline,
            )

        result = await self._tx_runner.run(_assign)
        await log_info(
            f"Заказ {order_id} назначен курьеру {result.courier_id} до {result.deadline.isoformat()}",
            type_msg=TypeMsg.INFO,
        )
        return result


class ReleaseService:
    """Снимает назначение и завершает доставки."""

    def __init__(
        self,
        courier_repository: CourierRepository,
        delivery_repository: DeliveryRepository,
        tx_runner: TransactionRunner,
    ) -> None:
        self._couriers = courier_repository
        self._deliveries = delivery_repository
        self._tx_runner = tx_runner

    async def unassign(self, order_id: str) -> UnassignResult:
        """
        Удаляет доставку заказа и освобождает курьера.

        Raises:
            NoOrderIDError: Пустой order_id
            OrderIDNotFoundError: Доставки нет (или её уже удалили)
        """
        if not order_id:
            raise NoOrderIDError()

        async def _unassign() -> UnassignResult:
            delivery = await self._deliveries.couriers_delivery(order_id)
            await self._deliveries.delete_delivery(order_id)

            courier = await self._couriers.get_courier_by_id(delivery.courier_id)
            if courier.release():
                await self._couriers.update_courier(courier)

            return UnassignResult(order_id=order_id, courier_id=courier.id)

        result = await self._tx_runner.run(_unassign)
        await log_info(
            f"Назначение заказа {order_id} снято, курьер {result.courier_id} свободен",
            type_msg=TypeMsg.INFO,
        )
        return result

    async def complete(self, order_id: str) -> None:
        """
        Освобождает курьера завершённого заказа.
        Строка доставки остаётся в БД и учитывается в загрузке курьера.

        Raises:
            NoOrderIDError: Пустой order_id
            OrderNotFoundError: Заказ никому не назначен
        """
        if not order_id:
            raise NoOrderIDError()

        async def _complete() -> int:
            courier_id = await self._couriers.get_courier_id_by_order_id(order_id)
            if courier_id is None:
                raise OrderNotFoundError(order_id)

            courier = await self._couriers.get_courier_by_id(courier_id)
            if courier.release():
                await self._couriers.update_courier(courier)
            return courier.id

        courier_id = await self._tx_runner.run(_complete)
        await log_info(f"Заказ {order_id} завершён, курьер {courier_id} свободен", type_msg=TypeMsg.INFO)
