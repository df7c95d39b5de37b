# src/services/__init__.py
"""
HTTP сервисы приложения.

Сервисы:
- courier_service: назначение заказов курьерам, снятие назначений, список и регистрация курьеров
"""

__all__: list[str] = []
