# src/core/deliveries/models.py
"""
Модели данных доставок.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from src.common.constants import UNASSIGNED_STATUS, TransportType


class Delivery(BaseModel):
    """Связка заказа и курьера."""

    id: int = Field(0, description="ID доставки (назначается БД)")
    order_id: str = Field(..., description="ID заказа")
    courier_id: int = Field(..., description="ID курьера")
    assigned_at: datetime = Field(..., description="Время назначения")
    deadline: datetime = Field(..., description="Крайний срок доставки")

    class Config:
        from_attributes = True


class AssignResult(BaseModel):
    """Результат назначения заказа курьеру."""

    courier_id: int
    order_id: str
    transport_type: TransportType
    deadline: datetime


class UnassignResult(BaseModel):
    """Результат снятия назначения."""

    order_id: str
    courier_id: int
    status: str = UNASSIGNED_STATUS
