"""
Configuration & Environment Management for the Event Manager
"""

import logging
import os
import re
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings

logger = logging.getLogger(__name__)

_ORGANISER_PASSWORD_ENV = re.compile(r"^ORGANISER_PASSWORD_(\d+)$")


def _organiser_passwords_from_env() -> Dict[int, str]:
    """Collect ORGANISER_PASSWORD_<id> variables from the process environment."""
    passwords: Dict[int, str] = {}
    for key, value in os.environ.items():
        match = _ORGANISER_PASSWORD_ENV.match(key)
        if match and value:
            passwords[int(match.group(1))] = value
    return passwords


class DatabaseSettings(PydanticBaseSettings):
    """Database configuration settings"""

    URL: str = "sqlite+aiosqlite:///./event_manager.db"
    ECHO: bool = False
    POOL_PRE_PING: bool = True

    @property
    def database_url(self) -> str:
        """Database URL with an async driver"""
        url = self.URL
        if url.startswith("sqlite://"):
            return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    class Config:
        env_prefix = "DB_"
        case_sensitive = True


class RedisSettings(PydanticBaseSettings):
    """Redis configuration settings (session storage)"""

    HOST: str = "localhost"
    PORT: int = 6379
    DB: int = 0
    PASSWORD: Optional[str] = None

    @property
    def redis_url(self) -> str:
        """Generate Redis URL"""
        auth = f":{self.PASSWORD}@" if self.PASSWORD else ""
        return f"redis://{auth}{self.HOST}:{self.PORT}/{self.DB}"

    class Config:
        env_prefix = "REDIS_"
        case_sensitive = True


class SecuritySettings(PydanticBaseSettings):
    """Session and organiser credential settings"""

    # Unset means a per-process secret; see create_app
    SESSION_SECRET: Optional[str] = None
    SESSION_ALGORITHM: str = "HS256"
    SESSION_TTL_SECONDS: int = 24 * 60 * 60
    SESSION_COOKIE_NAME: str = "organiser_session"
    SESSION_COOKIE_SECURE: bool = False

    # Passwords are configuration only; they never reach the database.
    ORGANISER_PASSWORDS: Dict[int, str] = Field(
        default_factory=_organiser_passwords_from_env
    )

    @field_validator("ORGANISER_PASSWORDS", mode="after")
    @classmethod
    def merge_env_passwords(cls, v: Dict[int, str]) -> Dict[int, str]:
        merged = _organiser_passwords_from_env()
        merged.update(v)
        return merged

    class Config:
        env_prefix = "SECURITY_"
        case_sensitive = True


class MonitoringSettings(PydanticBaseSettings):
    """Logging settings"""

    LOG_LEVEL: str = "INFO"

    class Config:
        env_prefix = "MONITORING_"
        case_sensitive = True


class Settings(PydanticBaseSettings):
    """Main application settings"""

    # Environment
    ENVIRONMENT: str = "development"
    TESTING: bool = False
    VERSION: str = "1.0.0"

    PROJECT_NAME: str = "Event Manager"

    # Create tables and seed organisers on startup
    SEED_DEFAULTS: bool = True

    # Component Settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    def summary(self) -> Dict[str, Any]:
        """Non-secret view of the configuration for startup logs"""
        return {
            "environment": self.ENVIRONMENT,
            "version": self.VERSION,
            "database_driver": self.database.database_url.split(":", 1)[0],
            "organisers_configured": sorted(self.security.ORGANISER_PASSWORDS),
        }

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
