# src/core/orders/models.py
"""
Модели данных заказов внешнего сервиса.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Order(BaseModel):
    """Заказ в том виде, в каком его отдаёт сервис заказов."""

    id: str = Field(..., description="ID заказа")
    status: str = Field(..., description="Статус заказа")
    created_at: Optional[datetime] = Field(None, description="Дата создания")

    class Config:
        from_attributes = True


class OrderStatusChangedEvent(BaseModel):
    """Сообщение очереди об изменении статуса заказа."""

    order_id: str
    status: str
    created_at: Optional[datetime] = None
