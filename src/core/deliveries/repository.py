# src/core/deliveries/repository.py
"""
Репозиторий доставок.
order_id уникален: повторное назначение заказа отклоняется на уровне БД.
"""

from __future__ import annotations

import asyncpg

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info
from src.core.couriers.errors import StoreError
from src.core.deliveries.errors import OrderIDExistsError, OrderIDNotFoundError
from src.core.deliveries.models import Delivery
from src.infra.database import DatabaseManager, rows_affected


class DeliveryRepository:
    """Репозиторий доставок."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def create_delivery(self, delivery: Delivery) -> Delivery:
        """
        Сохраняет доставку.

        Returns:
            Доставка с ID из БД

        Raises:
            OrderIDExistsError: Заказ уже назначен
            StoreError: Ошибка БД
        """
        try:
            row = await self._db.fetchrow(
                """
                INSERT INTO delivery (order_id, courier_id, assigned_at, deadline)
                VALUES ($1, $2, $3, $4)
                RETURNING id, order_id, courier_id, assigned_at, deadline
                """,
                delivery.order_id,
                delivery.courier_id,
                delivery.assigned_at,
                delivery.deadline,
            )
        except asyncpg.UniqueViolationError as e:
            raise OrderIDExistsError(delivery.order_id) from e
        except asyncpg.PostgresError as e:
            await log_error(f"Ошибка создания доставки для заказа {delivery.order_id}: {e}")
            raise StoreError(f"Ошибка создания доставки для заказа {delivery.order_id}") from e

        await log_info(
            f"Доставка {row['id']}: заказ {delivery.order_id} -> курьер {delivery.courier_id}",
            type_msg=TypeMsg.DEBUG,
        )
        return Delivery(
            id=row["id"],
            order_id=row["order_id"],
            courier_id=row["courier_id"],
            assigned_at=row["assigned_at"],
            deadline=row["deadline"],
        )

    async def couriers_delivery(self, order_id: str) -> Delivery:
        """
        Находит доставку по ID заказа.

        Raises:
            OrderIDNotFoundError: Доставки нет
        """
        try:
            row = await self._db.fetchrow(
                """
                SELECT d.id, d.order_id, d.courier_id, d.assigned_at, d.deadline
                FROM delivery d
                JOIN couriers c ON c.id = d.courier_id
                WHERE d.order_id = $1
                """,
                order_id,
            )
        except asyncpg.PostgresError as e:
            await log_error(f"Ошибка получения доставки заказа {order_id}: {e}")
            raise StoreError(f"Ошибка получения доставки заказа {order_id}") from e

        if row is None:
            raise OrderIDNotFoundError(order_id)

        return Delivery(
            id=row["id"],
            order_id=row["order_id"],
            courier_id=row["courier_id"],
            assigned_at=row["assigned_at"],
            deadline=row["deadline"],
        )

    async def delete_delivery(self, order_id: str) -> None:
        """
        Удаляет доставку заказа.

        Raises:
            OrderIDNotFoundError: Ни одна строка не удалена
        """
        try:
            status = await self._db.execute(
                "DELETE FROM delivery WHERE order_id = $1",
                order_id,
            )
        except asyncpg.PostgresError as e:
            await log_error(f"Ошибка удаления доставки заказа {order_id}: {e}")
            raise StoreError(f"Ошибка удаления доставки заказа {order_id}") from e

        if rows_affected(status) == 0:
            raise OrderIDNotFoundError(order_id)
