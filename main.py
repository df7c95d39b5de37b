#!/usr/bin/env python3
# main.py
"""
Главная точка входа сервиса курьеров.
Запускает HTTP API, воркеры или всё вместе в зависимости от аргументов.
"""

from __future__ import annotations

import asyncio
import signal
import sys

from src.config import settings
from src.common.logger import setup_logging, log_info, log_error
from src.common.constants import TypeMsg
from src.infra.database import init_db, close_db
from src.infra.event_bus import init_event_bus, close_event_bus


VALID_MODES = ("api", "worker", "all")

# Глобальный флаг для graceful shutdown
_shutdown_event: asyncio.Event | None = None
_running_tasks: list[asyncio.Task] = []


def setup_signal_handlers() -> None:
    """Настраивает обработчики сигналов для graceful shutdown."""
    global _shutdown_event
    _shutdown_event = asyncio.Event()

    def signal_handler(sig: int) -> None:
        """Обработчик сигналов SIGINT и SIGTERM."""
        if _shutdown_event and not _shutdown_event.is_set():
            print(f"\nПолучен сигнал остановки (sig={sig}), завершаем работу...")
            _shutdown_event.set()
            for task in _running_tasks:
                if not task.done():
                    task.cancel()

    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))
    except NotImplementedError:
        # Windows не поддерживает add_signal_handler
        signal.signal(signal.SIGINT, lambda s, f: signal_handler(s))
        signal.signal(signal.SIGTERM, lambda s, f: signal_handler(s))


async def init_infrastructure(mode: str) -> None:
    """Инициализирует подключения, нужные выбранному режиму."""
    await log_info("Инициализация инфраструктуры...", type_msg=TypeMsg.INFO)

    await init_db()

    # RabbitMQ нужен только воркерам
    if mode in ("worker", "all"):
        await init_event_bus()

    await log_info("Инфраструктура инициализирована", type_msg=TypeMsg.INFO)


async def close_infrastructure(mode: str) -> None:
    """Закрывает все подключения."""
    await log_info("Закрытие подключений...", type_msg=TypeMsg.INFO)

    if mode in ("worker", "all"):
        await close_event_bus()
    await close_db()

    await log_info("Подключения закрыты", type_msg=TypeMsg.INFO)


async def run_api() -> None:
    """Запускает HTTP API (освобождение курьеров стартует в lifespan)."""
    import uvicorn

    await log_info(
        f"Запуск HTTP API на {settings.server.API_HOST}:{settings.server.API_PORT}...",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "src.services.courier_service.app:app",
        host=settings.server.API_HOST,
        port=settings.server.API_PORT,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    try:
        await server.serve()
    except asyncio.CancelledError:
        await log_info("HTTP API: graceful shutdown", type_msg=TypeMsg.DEBUG)
        await server.shutdown()


async def run_worker() -> None:
    """Запускает воркеры событий сервиса заказов."""
    from src.worker.runner import run_workers

    # Инфраструктура уже инициализирована в main()
    await run_workers(init_infra=False)


async def main(mode: str | None = None) -> None:
    """
    Главная функция запуска.

    Args:
        mode: Режим запуска (api, worker, all).
              Если None, берётся из COMPONENT_MODE.
    """
    global _running_tasks

    setup_logging()
    setup_signal_handlers()

    if mode is None:
        mode = settings.system.COMPONENT_MODE
        if mode not in VALID_MODES:
            await log_error(f"Неизвестный COMPONENT_MODE '{mode}', используется 'all'")
            mode = "all"

    await log_info(
        f"Courier Service v{settings.system.VERSION} — запуск в режиме '{mode}'",
        type_msg=TypeMsg.INFO,
    )

    try:
        await init_infrastructure(mode)

        if mode == "api":
            _running_tasks = [asyncio.create_task(run_api())]
        elif mode == "worker":
            _running_tasks = [asyncio.create_task(run_worker())]
        else:
            _running_tasks = [
                asyncio.create_task(run_api()),
                asyncio.create_task(run_worker()),
            ]

        await asyncio.gather(*_running_tasks, return_exceptions=True)

    except asyncio.CancelledError:
        await log_info("Получен сигнал остановки", type_msg=TypeMsg.INFO)
    except Exception as e:
        await log_error(f"Критическая ошибка: {e}", exc_info=True)
    finally:
        try:
            await close_infrastructure(mode)
        except Exception as e:
            await log_error(f"Ошибка при закрытии подключений: {e}")
        await log_info("Приложение остановлено", type_msg=TypeMsg.INFO)


def print_usage() -> None:
    """Выводит справку по использованию."""
    print("""
Courier Service — назначение заказов курьерам

Использование:
    python main.py [mode]

Режимы:
    api        — HTTP API + освобождение курьеров по дедлайну (:8080)
    worker     — обработка событий order.status_changed из RabbitMQ
    all        — всё вместе в одном процессе

Без аргумента режим берётся из COMPONENT_MODE.
    """)


if __name__ == "__main__":
    mode = None

    if len(sys.argv) > 1:
        arg = sys.argv[1].lower()
        if arg in ("--help", "-h"):
            print_usage()
            sys.exit(0)
        elif arg in VALID_MODES:
            mode = arg
        else:
            print(f"Ошибка: неизвестный режим '{arg}'")
            print_usage()
            sys.exit(1)

    try:
        asyncio.run(main(mode))
    except KeyboardInterrupt:
        pass
