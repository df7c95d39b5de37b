# src/core/couriers/models.py
"""
Модели данных курьеров и машина состояний статуса.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.common.constants import CourierStatus, TransportType
from src.core.couriers.errors import CourierStatusTransitionError


class CourierStateMachine:
    """Допустимые переходы статуса курьера."""

    ALLOWED_TRANSITIONS = {
        CourierStatus.AVAILABLE: [CourierStatus.BUSY],
        CourierStatus.BUSY: [CourierStatus.AVAILABLE],
    }

    @staticmethod
    def can_transition(current_status: str, new_status: str) -> bool:
        try:
            curr = CourierStatus(current_status)
            new = CourierStatus(new_status)
            return new in CourierStateMachine.ALLOWED_TRANSITIONS.get(curr, [])
        except ValueError:
            return False


class Courier(BaseModel):
    """Модель курьера."""

    id: int = Field(0, description="ID курьера (назначается БД)")
    name: str = Field(..., description="Имя курьера")
    phone: str = Field(..., description="Номер телефона")
    status: CourierStatus = Field(CourierStatus.AVAILABLE, description="Статус курьера")
    transport_type: TransportType = Field(..., description="Тип транспорта")

    created_at: Optional[datetime] = Field(None, description="Дата создания")
    updated_at: Optional[datetime] = Field(None, description="Дата обновления")

    class Config:
        from_attributes = True

    @property
    def is_available(self) -> bool:
        """Свободен ли курьер."""
        return self.status == CourierStatus.AVAILABLE

    def _transition(self, new_status: CourierStatus) -> None:
        if not CourierStateMachine.can_transition(self.status, new_status):
            raise CourierStatusTransitionError(self.id, self.status.value, new_status.value)
        self.status = new_status

    def assign(self) -> None:
        """
        Переводит курьера в статус busy.

        Raises:
            CourierStatusTransitionError: Курьер уже занят
        """
        self._transition(CourierStatus.BUSY)

    def release(self) -> bool:
        """
        Переводит курьера в статус available.
        Курьер мог быть освобождён раньше фоновой проверкой дедлайнов,
        в этом случае статус не меняется.

        Returns:
            True если статус изменился
        """
        if self.is_available:
            return False
        self._transition(CourierStatus.AVAILABLE)
        return True


class CourierCreateDTO(BaseModel):
    """DTO для создания курьера."""

    name: str
    phone: str
    transport_type: TransportType


class CourierUpdateDTO(BaseModel):
    """DTO для частичного изменения курьера. None означает «не менять»."""

    id: int = 0
    name: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[CourierStatus] = None
    transport_type: Optional[str] = None

    def changes(self) -> dict[str, object]:
        """Поля, которые нужно изменить."""
        return self.model_dump(exclude={"id"}, exclude_none=True)
