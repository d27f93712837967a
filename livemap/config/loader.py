# livemap/config/loader.py
"""
Загрузчик конфигурации проекта.
Единственный источник истины — config/config.json.
Порт и уровень логирования могут быть переопределены из переменных окружения.
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


def load_config_json() -> dict[str, Any]:
    """Загружает config.json и возвращает словарь."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "livemap"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/livemap.log"
    LOG_FORMAT: str = "colored"
    LOG_MAX_BYTES: int = 10485760
    LOG_BACKUP_COUNT: int = 5

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_format(cls, v: str) -> str:
        """Допустимы только colored и json."""
        if v not in ("colored", "json"):
            raise ValueError(f"Неизвестный формат логов: {v}")
        return v


class RelaySettings(BaseModel):
    """Настройки relay-сервера."""
    RELAY_HOST: str = "0.0.0.0"
    RELAY_PORT: int = Field(default=9090, validate_default=True)
    RELAY_WS_PATH: str = "/ws"
    # Отправлять ли отправителю его собственное обновление
    ECHO_TO_SENDER: bool = True

    @field_validator("RELAY_PORT", mode="before")
    @classmethod
    def get_from_env(cls, v: int) -> int:
        """Порт из переменной окружения имеет приоритет."""
        env_port = os.getenv("RELAY_PORT", "")
        if env_port:
            return int(env_port)
        return v


class GeolocationSettings(BaseModel):
    """Параметры подписки на геолокацию в браузере."""
    ENABLE_HIGH_ACCURACY: bool = True
    TIMEOUT_MS: int = Field(default=5000, ge=0)
    MAXIMUM_AGE_MS: int = Field(default=0, ge=0)


class MapSettings(BaseModel):
    """Настройки карты."""
    DEFAULT_LAT: float = 0.0
    DEFAULT_LON: float = 0.0
    DEFAULT_ZOOM: int = 16
    PAGE_TITLE: str = "Live Map"


class WebClientSettings(BaseModel):
    """Настройки страницы карты."""
    # Пустая строка: ws://127.0.0.1:<RELAY_PORT><RELAY_WS_PATH>
    RELAY_WS_URL: str = ""
    RECONNECT_DELAY: float = 5.0


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    system: SystemSettings = Field(default_factory=SystemSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    relay: RelaySettings = Field(default_factory=RelaySettings)
    geolocation: GeolocationSettings = Field(default_factory=GeolocationSettings)
    map: MapSettings = Field(default_factory=MapSettings)
    web_client: WebClientSettings = Field(default_factory=WebClientSettings)

    @classmethod
    def from_dict(cls, config_data: dict[str, Any]) -> "Settings":
        """
        Создаёт объект Settings из плоского словаря config.json.
        Ключи, начинающиеся с _comment_, игнорируются.
        """
        data = {k: v for k, v in config_data.items() if not k.startswith("_comment_")}

        # LOG_LEVEL из окружения — для быстрой отладки без правки json
        if os.getenv("LOG_LEVEL"):
            data["LOG_LEVEL"] = os.environ["LOG_LEVEL"]

        def section(model: type[BaseModel]) -> dict[str, Any]:
            return {name: data[name] for name in model.model_fields if name in data}

        return cls(
            system=SystemSettings(**section(SystemSettings)),
            logging=LoggingSettings(**section(LoggingSettings)),
            relay=RelaySettings(**section(RelaySettings)),
            geolocation=GeolocationSettings(**section(GeolocationSettings)),
            map=MapSettings(**section(MapSettings)),
            web_client=WebClientSettings(**section(WebClientSettings)),
        )

    @classmethod
    def from_config_json(cls) -> "Settings":
        """Создаёт объект Settings из config.json."""
        return cls.from_dict(load_config_json())


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Использует кэширование для производительности.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Экспорт синглтона для удобного импорта
settings = get_settings()
