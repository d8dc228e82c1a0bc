"""Application Settings - Central Configuration"""
from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "repair_desk_dev"

    # Logging
    logs_path: str = "./logs"
    log_level: str = "INFO"

    # Localization
    default_locale: str = "en"
    supported_locales: str = "en,fr,ar"

    # Ticket lifecycle
    return_window_days: int = 30  # Used when the settings store has no valid override

    # Notifications
    notification_channel: str = "in-app"
    notification_delivery_timeout_seconds: Optional[float] = None  # None = no timeout per delivery
    delivery_log_buffer_size: int = 500  # Recent delivery attempts kept in memory

    # Environment
    environment: str = "development"
    debug: bool = True

    @property
    def supported_locales_list(self) -> List[str]:
        """Parse supported locales string to list"""
        return [locale.strip() for locale in self.supported_locales.split(",") if locale.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
