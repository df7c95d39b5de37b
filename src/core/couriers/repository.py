# src/core/couriers/repository.py
"""
Репозиторий для работы с курьерами в БД.
Все методы работают в текущей транзакции, если она открыта через TransactionRunner.
"""

from __future__ import annotations

from typing import Any, Optional

import asyncpg

from src.common.constants import CourierStatus, TypeMsg
from src.common.logger import log_error, log_info
from src.core.couriers.errors import CourierNotFoundError, StoreError
from src.core.couriers.models import Courier, CourierCreateDTO
from src.infra.database import DatabaseManager, rows_affected


_COURIER_COLUMNS = "c.id, c.name, c.phone, c.status, c.transport_type, c.created_at, c.updated_at"


def _row_to_courier(row: Any) -> Courier:
    return Courier(
        id=row["id"],
        name=row["name"],
        phone=row["phone"],
        status=row["status"],
        transport_type=row["transport_type"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class CourierRepository:
    """Репозиторий курьеров."""

    def __init__(self, db: DatabaseManager) -> None:
        """
        Инициализация репозитория.

        Args:
            db: Менеджер базы данных (Dependency Injection)
        """
        self._db = db

    async def get_courier_by_id(self, courier_id: int, for_update: bool = False) -> Courier:
        """
        Получает курьера по ID.
        С for_update строка блокируется до конца транзакции.

        Raises:
            CourierNotFoundError: Курьер не найден
            StoreError: Ошибка БД
        """
        try:
            row = await self._db.fetchrow(
                f"""
                SELECT {_COURIER_COLUMNS}
                FROM couriers c
                WHERE c.id = $1
                {'FOR UPDATE' if for_update else ''}
                """,
                courier_id,
            )
        except asyncpg.PostgresError as e:
            await log_error(f"Ошибка получения курьера {courier_id}: {e}")
            raise StoreError(f"Ошибка получения курьера {courier_id}") from e

        if row is None:
            raise CourierNotFoundError(courier_id)

        return _row_to_courier(row)

    async def get_all_couriers(self) -> list[Courier]:
        """Возвращает всех курьеров, упорядоченных по ID."""
        try:
            rows = await self._db.fetch(
                f"""
                SELECT {_COURIER_COLUMNS}
                FROM couriers c
                ORDER BY c.id
                """
            )
        except asyncpg.PostgresError as e:
            await log_error(f"Ошибка получения списка курьеров: {e}")
            raise StoreError("Ошибка получения списка курьеров") from e

        return [_row_to_courier(row) for row in rows]

    async def create_courier(self, dto: CourierCreateDTO) -> Courier:
        """
        Создаёт нового курьера в статусе available.

        Returns:
            Созданный курьер с ID из БД

        Raises:
            StoreError: Ошибка БД (в том числе дубликат телефона)
        """
        try:
            row = await self._db.fetchrow(
                """
                INSERT INTO couriers AS c (name, phone, status, transport_type, created_at, updated_at)
                VALUES ($1, $2, $3, $4, NOW(), NOW())
                RETURNING c.id, c.name, c.phone, c.status, c.transport_type, c.created_at, c.updated_at
                """,
                dto.name,
                dto.phone,
                CourierStatus.AVAILABLE.value,
                dto.transport_type.value,
            )
        except asyncpg.UniqueViolationError as e:
            raise StoreError(f"Курьер с телефоном {dto.phone} уже существует") from e
        except asyncpg.PostgresError as e:
            await log_error(f"Ошибка создания курьера {dto.phone}: {e}")
            raise StoreError(f"Ошибка создания курьера {dto.phone}") from e

        courier = _row_to_courier(row)
        await log_info(f"Курьер {courier.id} создан", type_msg=TypeMsg.DEBUG)
        return courier

    async def update_courier(self, courier: Courier) -> None:
        """
        Сохраняет изменения курьера и обновляет updated_at.

        Raises:
            CourierNotFoundError: Курьер не найден
            StoreError: Ошибка БД
        """
        try:
            status = await self._db.execute(
                """
                UPDATE couriers
                SET name = $2, phone = $3, status = $4, transport_type = $5, updated_at = NOW()
                WHERE id = $1
                """,
                courier.id,
                courier.name,
                courier.phone,
                courier.status.value,
                courier.transport_type.value,
            )
        except asyncpg.PostgresError as e:
            await log_error(f"Ошибка обновления курьера {courier.id}: {e}")
            raise StoreError(f"Ошибка обновления курьера {courier.id}") from e

        if rows_affected(status) == 0:
            raise CourierNotFoundError(courier.id)

    async def find_available_courier(self) -> Optional[Courier]:
        """
        Выбирает свободного курьера с наименьшим числом доставок.
        При равенстве побеждает меньший ID.

        Строка курьера блокируется до конца транзакции, уже заблокированные
        строки пропускаются, поэтому параллельные назначения не выберут
        одного и того же курьера.

        Returns:
            Курьер или None, если свободных нет
        """
        try:
            row = await self._db.fetchrow(
                f"""
                SELECT {_COURIER_COLUMNS}
                FROM couriers c
                WHERE c.status = $1
                ORDER BY (SELECT COUNT(*) FROM delivery d WHERE d.courier_id = c.id) ASC, c.id ASC
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                CourierStatus.AVAILABLE.value,
            )
        except asyncpg.PostgresError as e:
            await log_error(f"Ошибка поиска свободного курьера: {e}")
            raise StoreError("Ошибка поиска свободного курьера") from e

        if row is None:
            return None

        return _row_to_courier(row)

    async def exists_courier_by_phone(self, phone: str) -> bool:
        """Проверяет, зарегистрирован ли курьер с таким телефоном."""
        try:
            exists = await self._db.fetchval(
                "SELECT EXISTS(SELECT 1 FROM couriers WHERE phone = $1)",
                phone,
            )
        except asyncpg.PostgresError as e:
            await log_error(f"Ошибка проверки телефона курьера: {e}")
            raise StoreError("Ошибка проверки телефона курьера") from e

        return bool(exists)

    async def get_courier_id_by_order_id(self, order_id: str) -> Optional[int]:
        """
        Возвращает ID курьера, которому назначен заказ.

        Returns:
            ID курьера или None, если доставки нет
        """
        try:
            return await self._db.fetchval(
                "SELECT courier_id FROM delivery WHERE order_id = $1",
                order_id,
            )
        except asyncpg.PostgresError as e:
            await log_error(f"Ошибка поиска курьера по заказу {order_id}: {e}")
            raise StoreError(f"Ошибка поиска курьера по заказу {order_id}") from e

    async def free_couriers_with_interval(self) -> int:
        """
        Освобождает занятых курьеров, у которых дедлайн последней
        (по assigned_at) доставки уже прошёл.

        Returns:
            Количество освобождённых курьеров
        """
        try:
            status = await self._db.execute(
                """
                UPDATE couriers c
                SET status = $1, updated_at = NOW()
                WHERE c.status = $2
                  AND EXISTS (
                      SELECT 1
                      FROM delivery d
                      WHERE d.courier_id = c.id
                        AND d.assigned_at = (
                            SELECT MAX(d2.assigned_at)
                            FROM delivery d2
                            WHERE d2.courier_id = c.id
                        )
                        AND d.deadline < NOW()
                  )
                """,
                CourierStatus.AVAILABLE.value,
                CourierStatus.BUSY.value,
            )
        except asyncpg.PostgresError as e:
            await log_error(f"Ошибка освобождения курьеров по дедлайну: {e}")
            raise StoreError("Ошибка освобождения курьеров по дедлайну") from e

        return rows_affected(status)
