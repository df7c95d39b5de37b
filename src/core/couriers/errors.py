# src/core/couriers/errors.py
"""
Исключения сервиса курьеров.
"""

from __future__ import annotations


class CourierServiceError(Exception):
    """Базовое исключение сервиса курьеров."""


class StoreError(CourierServiceError):
    """Ошибка хранилища (оборачивает asyncpg.PostgresError)."""


class CourierNotFoundError(CourierServiceError):
    """Курьер не найден."""

    def __init__(self, courier_id: int) -> None:
        self.courier_id = courier_id
        super().__init__(f"Курьер {courier_id} не найден")


class CouriersBusyError(CourierServiceError):
    """Нет свободных курьеров."""

    def __init__(self) -> None:
        super().__init__("Все курьеры заняты")


class UnknownTransportTypeError(CourierServiceError):
    """Для типа транспорта нет калькулятора доставки."""

    def __init__(self, transport_type: str) -> None:
        self.transport_type = transport_type
        super().__init__(f"Неизвестный тип транспорта: {transport_type}")


class CourierStatusTransitionError(CourierServiceError):
    """Недопустимый переход статуса курьера."""

    def __init__(self, courier_id: int, current: str, target: str) -> None:
        self.courier_id = courier_id
        self.current = current
        self.target = target
        super().__init__(f"Курьер {courier_id}: переход {current} -> {target} запрещён")


class CourierPhoneExistsError(CourierServiceError):
    """Курьер с таким телефоном уже зарегистрирован."""

    def __init__(self, phone: str) -> None:
        self.phone = phone
        super().__init__(f"Телефон {phone} уже зарегистрирован")


class InvalidCourierUpdateError(CourierServiceError):
    """Некорректный запрос на изменение курьера."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)
