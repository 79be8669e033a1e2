from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Warehouse Inventory API"
    ENVIRONMENT: str = "local"
    API_PREFIX: str = "/api/v1"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./warehouse.db"
    DATABASE_ECHO: bool = False

    # ==============================
    # Logging / Audit
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    AUDIT_LOGGER_NAME: str = "AUDIT"
    SLOW_OPERATION_MS: int = 5000
    DEFAULT_USER_ID: str = "SYSTEM"

    # ==============================
    # Reports
    # ==============================
    RECENT_TRANSACTIONS_LIMIT: int = 10

    # ==============================
    # Metrics
    # ==============================
    METRICS_ENABLED: bool = True

    # ==============================
    # Security
    # ==============================
    API_KEYS: Optional[str] = None
    API_KEY_HEADER: str = "X-API-Key"
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = None
    JWT_ISSUER: Optional[str] = None
    JWT_REQUIRED: bool = False
    BASIC_AUTH_USERNAME: Optional[str] = None
    BASIC_AUTH_PASSWORD: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
