# src/worker/runner.py
"""
Запускалка воркеров обработки событий сервиса заказов.
"""

from __future__ import annotations

import asyncio
from typing import List

from src.worker.base import BaseWorker
from src.worker.orders import OrderChangedWorker
from src.core.factory import build_order_changed_service
from src.core.orders.gateway import get_order_gateway
from src.infra.database import init_db, close_db
from src.infra.event_bus import init_event_bus, close_event_bus
from src.common.logger import log_info, log_error
from src.common.constants import TypeMsg


async def run_workers(init_infra: bool = True) -> None:
    """
    Запускает OrderChangedWorker и ждёт отмены.

    Args:
        init_infra: Если True, инициализирует инфраструктуру (БД, RabbitMQ).
                    При запуске через main.py передаётся False,
                    так как инфраструктура уже инициализирована.
    """
    await log_info("Запуск воркеров...", type_msg=TypeMsg.INFO)

    if init_infra:
        await log_info("Инициализация инфраструктуры для воркеров...", type_msg=TypeMsg.DEBUG)
        await init_db()
        await init_event_bus()

    gateway = get_order_gateway()
    workers: List[BaseWorker] = [
        OrderChangedWorker(build_order_changed_service(gateway=gateway)),
    ]

    try:
        for worker in workers:
            await worker.start()

        await log_info(
            f"Запущено {len(workers)} воркеров",
            type_msg=TypeMsg.INFO,
        )

        # Ждём завершения (Ctrl+C)
        while True:
            await asyncio.sleep(1)

    except asyncio.CancelledError:
        await log_info("Получен сигнал остановки", type_msg=TypeMsg.INFO)
    except Exception as e:
        await log_error(f"Критическая ошибка: {e}")
    finally:
        for worker in workers:
            await worker.stop()

        await gateway.close()

        if init_infra:
            await close_event_bus()
            await close_db()

        await log_info("Воркеры остановлены", type_msg=TypeMsg.INFO)


def main() -> None:
    """Точка входа."""
    try:
        asyncio.run(run_workers())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
