# src/services/courier_service/__init__.py
"""
HTTP API сервиса курьеров.
"""
