# src/core/couriers/service.py
"""
Сервис курьеров.
Чтение и регистрация курьеров, фоновое освобождение курьеров по дедлайну.
"""

from __future__ import annotations

import asyncio

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info
from src.core.couriers.errors import CourierPhoneExistsError, InvalidCourierUpdateError
from src.core.couriers.models import Courier, CourierCreateDTO, CourierUpdateDTO
from src.core.couriers.repository import CourierRepository
from src.core.deliveries.calculator import DeliveryCalculatorFactory
from src.infra.database import TransactionRunner


class CourierService:
    """Сервис управления курьерами."""

    def __init__(self, repository: CourierRepository, tx_runner: TransactionRunner) -> None:
        """
        Args:
            repository: Репозиторий курьеров
            tx_runner: Исполнитель транзакций
        """
        self._repository = repository
        self._tx_runner = tx_runner

    async def get_courier(self, courier_id: int) -> Courier:
        """
        Получает курьера по ID.

        Raises:
            CourierNotFoundError: Курьер не найден
        """
        return await self._repository.get_courier_by_id(courier_id)

    async def get_all_couriers(self) -> list[Courier]:
        """Возвращает всех курьеров."""
        return await self._repository.get_all_couriers()

    async def create_courier(self, dto: CourierCreateDTO) -> Courier:
        """
        Регистрирует нового курьера.

        Raises:
            CourierPhoneExistsError: Телефон уже зарегистрирован
        """
        async def _create() -> Courier:
            if await self._repository.exists_courier_by_phone(dto.phone):
                raise CourierPhoneExistsError(dto.phone)
            return await self._repository.create_courier(dto)

        courier = await self._tx_runner.run(_create)
        await log_info(
            f"Зарегистрирован курьер {courier.id} ({courier.transport_type.value})",
            type_msg=TypeMsg.INFO,
        )
        return courier

    async def update_courier(self, dto: CourierUpdateDTO) -> Courier:
        """
        Частично изменяет курьера: меняются только переданные поля.

        Raises:
            InvalidCourierUpdateError: Нет ID, нет полей или неизвестный тип транспорта
            CourierNotFoundError: Курьер не найден
            CourierPhoneExistsError: Телефон занят другим курьером
        """
        if dto.id <= 0:
            raise InvalidCourierUpdateError("Не указан id курьера")

        changes = dto.changes()
        if not changes:
            raise InvalidCourierUpdateError("Нет полей для изменения")

        if dto.transport_type is not None and DeliveryCalculatorFactory.get_calculator(dto.transport_type) is None:
            raise InvalidCourierUpdateError(f"Неизвестный тип транспорта: {dto.transport_type}")

        async def _update() -> Courier:
            courier = await self._repository.get_courier_by_id(dto.id, for_update=True)

            if dto.phone is not None and dto.phone != courier.phone:
                if await self._repository.exists_courier_by_phone(dto.phone):
                    raise CourierPhoneExistsError(dto.phone)

            updated = Courier.model_validate({**courier.model_dump(), **changes})
            await self._repository.update_courier(updated)
            return updated

        courier = await self._tx_runner.run(_update)
        await log_info(f"Курьер {courier.id} изменён: {', '.join(changes)}", type_msg=TypeMsg.INFO)
        return courier

    async def free_couriers_with_interval(self) -> int:
        """
        Освобождает курьеров с истёкшим дедлайном последней доставки.

        Returns:
            Количество освобождённых курьеров
        """
        return await self._tx_runner.run(self._repository.free_couriers_with_interval)

    async def check_free_couriers_with_interval(
        self,
        interval: float,
        stop_event: asyncio.Event,
    ) -> None:
        """
        Запускает освобождение курьеров раз в interval секунд до установки stop_event.
        Ошибка одного прохода логируется, цикл продолжается.

        Args:
            interval: Интервал между проходами (секунды)
            stop_event: Событие остановки
        """
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
                # Событие установлено, выходим без прохода
                return
            except asyncio.TimeoutError:
                pass

            try:
                freed = await self.free_couriers_with_interval()
                if freed:
                    await log_info(f"Освобождено курьеров по дедлайну: {freed}", type_msg=TypeMsg.INFO)
                else:
                    await log_info("Проверка дедлайнов: свободных курьеров не добавилось", type_msg=TypeMsg.DEBUG)
            except Exception as e:
                await log_error(f"Ошибка проверки свободных курьеров: {e}")
