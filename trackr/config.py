"""
Централизованная конфигурация клиента
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from trackr.constants import DEFAULT_API_TIMEOUT, PLATFORM_WEB


class Settings(BaseSettings):
    """Настройки клиента с валидацией через Pydantic"""

    # API
    api_base_url: str = "http://localhost:8000/api"
    api_timeout: int = DEFAULT_API_TIMEOUT

    # Платформа определяет, когда восстанавливаются сохранённые учетные данные
    platform: Literal["web", "native"] = PLATFORM_WEB

    # Хранилище
    storage_path: Path = Path.home() / ".trackr" / "credentials.json"
    progress_storage_path: Path = Path.home() / ".trackr" / "progress.json"

    # Логирование
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="TRACKR_",
        env_file=".env",
        case_sensitive=False,
    )


@lru_cache()
def get_settings() -> Settings:
    """Возвращает синглтон настроек"""
    return Settings()


@dataclass
class PageConfig:
    """Конфигурация страницы Streamlit."""

    title: str
    icon: str
    layout: str = "centered"
    initial_sidebar_state: str = "collapsed"


PAGE_CONFIG = PageConfig(title="Trackr", icon="🎬")
