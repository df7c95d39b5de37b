# src/config/loader.py
"""
Загрузчик конфигурации проекта.
Единственный источник истины — config/config.json.
Секретные данные и адреса переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации."""
    return get_project_root() / "config" / "config.json"


def load_config_json(path: Path | None = None) -> dict[str, Any]:
    """Загружает config.json и возвращает словарь без служебных _comment_ ключей."""
    config_path = path or get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return {k: v for k, v in data.items() if not k.startswith("_comment_")}


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "courier_service"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    COMPONENT_MODE: str = "all"


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "DEBUG"
    LOG_FORMAT: str = "colored"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_MAX_BYTES: int = 10485760

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_format(cls, v: str) -> str:
        """Допустимы только colored и json."""
        if v not in ("colored", "json"):
            raise ValueError(f"Неизвестный формат логов: {v}")
        return v


class DatabaseSettings(BaseModel):
    """Настройки PostgreSQL."""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "courier_service"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_MIN_POOL_SIZE: int = 2
    DB_MAX_POOL_SIZE: int = 10
    DB_COMMAND_TIMEOUT: int = 30
    DB_TX_ISOLATION: str = "read_committed"

    @field_validator("DB_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Получает пароль из переменных окружения."""
        if not v:
            return os.getenv("DB_PASSWORD", "")
        return v

    @field_validator("DB_TX_ISOLATION")
    @classmethod
    def check_isolation(cls, v: str) -> str:
        """Уровень изоляции должен быть не ниже read committed."""
        if v not in ("read_committed", "repeatable_read", "serializable"):
            raise ValueError(f"Недопустимый уровень изоляции: {v}")
        return v

    @property
    def dsn(self) -> str:
        """Возвращает DSN для подключения к PostgreSQL."""
        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


class RabbitMQSettings(BaseModel):
    """Настройки RabbitMQ."""
    RABBITMQ_HOST: str = "localhost"
    RABBITMQ_PORT: int = 5672
    RABBITMQ_USER: str = "guest"
    RABBITMQ_PASSWORD: str = "guest"
    RABBITMQ_VHOST: str = "/"
    RABBITMQ_EXCHANGE: str = "orders.events"
    RABBITMQ_PREFETCH_COUNT: int = 10
    ORDER_CHANGED_ROUTING_KEY: str = "order.status_changed"

    @property
    def url(self) -> str:
        """Возвращает URL для подключения к RabbitMQ."""
        return (
            f"amqp://{self.RABBITMQ_USER}:{self.RABBITMQ_PASSWORD}"
            f"@{self.RABBITMQ_HOST}:{self.RABBITMQ_PORT}{self.RABBITMQ_VHOST}"
        )


class ServerSettings(BaseModel):
    """Настройки HTTP API."""
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080


class OrdersSettings(BaseModel):
    """Настройки клиента сервиса заказов."""
    ORDER_SERVICE_URL: str = "http://localhost:8090"
    ORDER_SERVICE_TIMEOUT: float = 5.0


class CouriersSettings(BaseModel):
    """Настройки жизненного цикла курьеров."""
    CHECK_FREE_COURIERS_INTERVAL: float = 30.0

    @field_validator("CHECK_FREE_COURIERS_INTERVAL")
    @classmethod
    def check_positive(cls, v: float) -> float:
        """Интервал проверки должен быть положительным."""
        if v <= 0:
            raise ValueError("CHECK_FREE_COURIERS_INTERVAL должен быть больше 0")
        return v


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    system: SystemSettings = Field(default_factory=SystemSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    rabbitmq: RabbitMQSettings = Field(default_factory=RabbitMQSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    orders: OrdersSettings = Field(default_factory=OrdersSettings)
    couriers: CouriersSettings = Field(default_factory=CouriersSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        """
        Раскладывает плоский словарь конфигурации по секциям.
        Переменные окружения имеют приоритет над значениями из файла.
        """
        def env(key: str, default: Any) -> Any:
            return os.getenv(key, data.get(key, default))

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "courier_service"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", False),
                ENVIRONMENT=env("ENVIRONMENT", "development"),
                COMPONENT_MODE=env("COMPONENT_MODE", "all"),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=env("LOG_LEVEL", "DEBUG"),
                LOG_FORMAT=data.get("LOG_FORMAT", "colored"),
                LOG_TO_FILE=data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
            ),
            database=DatabaseSettings(
                DB_HOST=env("DB_HOST", "localhost"),
                DB_PORT=int(env("DB_PORT", 5432)),
                DB_NAME=env("DB_NAME", "courier_service"),
                DB_USER=env("DB_USER", "postgres"),
                DB_PASSWORD=env("DB_PASSWORD", ""),
                DB_MIN_POOL_SIZE=data.get("DB_MIN_POOL_SIZE", 2),
                DB_MAX_POOL_SIZE=data.get("DB_MAX_POOL_SIZE", 10),
                DB_COMMAND_TIMEOUT=data.get("DB_COMMAND_TIMEOUT", 30),
                DB_TX_ISOLATION=data.get("DB_TX_ISOLATION", "read_committed"),
            ),
            rabbitmq=RabbitMQSettings(
                RABBITMQ_HOST=env("RABBITMQ_HOST", "localhost"),
                RABBITMQ_PORT=int(env("RABBITMQ_PORT", 5672)),
                RABBITMQ_USER=env("RABBITMQ_USER", "guest"),
                RABBITMQ_PASSWORD=env("RABBITMQ_PASSWORD", "guest"),
                RABBITMQ_VHOST=data.get("RABBITMQ_VHOST", "/"),
                RABBITMQ_EXCHANGE=data.get("RABBITMQ_EXCHANGE", "orders.events"),
                RABBITMQ_PREFETCH_COUNT=data.get("RABBITMQ_PREFETCH_COUNT", 10),
                ORDER_CHANGED_ROUTING_KEY=data.get("ORDER_CHANGED_ROUTING_KEY", "order.status_changed"),
            ),
            server=ServerSettings(
                API_HOST=data.get("API_HOST", "0.0.0.0"),
                API_PORT=int(env("API_PORT", 8080)),
            ),
            orders=OrdersSettings(
                ORDER_SERVICE_URL=env("ORDER_SERVICE_URL", "http://localhost:8090"),
                ORDER_SERVICE_TIMEOUT=data.get("ORDER_SERVICE_TIMEOUT", 5.0),
            ),
            couriers=CouriersSettings(
                CHECK_FREE_COURIERS_INTERVAL=float(
                    env("CHECK_FREE_COURIERS_INTERVAL", 30.0)
                ),
            ),
        )

    @classmethod
    def from_config_json(cls) -> "Settings":
        """Создаёт объект Settings из config.json."""
        return cls.from_dict(load_config_json())


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Перед чтением config.json подгружает .env из корня проекта.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Экспорт синглтона для удобного импорта
settings = get_settings()
