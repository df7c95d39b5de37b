# src/core/deliveries/calculator.py
"""
Расчёт дедлайна доставки по типу транспорта.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from src.common.constants import TransportType


class DeliveryCalculatorFactory:
    """Таблица длительностей доставки по типу транспорта."""

    DURATIONS: dict[TransportType, timedelta] = {
        TransportType.CAR: timedelta(minutes=5),
        TransportType.SCOOTER: timedelta(minutes=10),
        TransportType.ON_FOOT: timedelta(minutes=15),
    }

    @classmethod
    def get_calculator(cls, transport_type: str) -> Optional[timedelta]:
        """
        Возвращает длительность доставки для типа транспорта.

        Args:
            transport_type: Тип транспорта (значение или TransportType)

        Returns:
            Длительность или None для неизвестного типа
        """
        try:
            return cls.DURATIONS.get(TransportType(transport_type))
        except ValueError:
            return None

    @classmethod
    def calculate_deadline(cls, transport_type: str, now: Optional[datetime] = None) -> Optional[datetime]:
        """Возвращает now + длительность доставки или None для неизвестного типа."""
        duration = cls.get_calculator(transport_type)
        if duration is None:
            return None
        return (now or datetime.now(timezone.utc)) + duration
