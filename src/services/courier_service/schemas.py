# src/services/courier_service/schemas.py
"""
Схемы запросов и ответов HTTP API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.common.constants import CourierStatus, TransportType, UNASSIGNED_STATUS


class DeliveryRequest(BaseModel):
    # Пустой order_id отклоняется сервисом (400), а не валидацией (422)
    order_id: str = ""


class AssignResponse(BaseModel):
    courier_id: int
    order_id: str
    transport_type: TransportType
    delivery_deadline: datetime


class UnassignResponse(BaseModel):
    order_id: str
    status: str = UNASSIGNED_STATUS
    courier_id: int


class CourierResponse(BaseModel):
    id: int
    name: str
    phone: str
    status: CourierStatus
    transport_type: TransportType
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CourierCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    transport_type: TransportType


class CourierCreateResponse(BaseModel):
    id: int
    message: str = "Courier created successfully"


class CourierUpdateRequest(BaseModel):
    # id=0 и пустой набор полей отклоняются сервисом (400)
    id: int = 0
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    status: Optional[CourierStatus] = None
    transport_type: Optional[str] = None


class CourierUpdateResponse(BaseModel):
    id: int
    message: str = "Courier updated successfully"
