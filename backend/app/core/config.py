import logging
from functools import lru_cache
from typing import Optional
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "admin-seed"
    VERSION: str = "0.1.0"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017/test_db",
        validation_alias=AliasChoices("MONGODB_URL", "MONGO_URI"),
    )
    # Only used when MONGODB_URL does not name a database
    MONGODB_DB_NAME: str = "test_db"
    MONGODB_TIMEOUT_MS: Optional[int] = None

    # Security
    SECRET_KEY: str = Field(
        default="9b293424-6013-435a-b9c2-902095034876",
        validation_alias=AliasChoices("SECRET_KEY", "JWT_SECRET"),
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Seeded administrator
    ADMIN_EMAIL: str = "admin@example.com"
    ADMIN_PASSWORD: str = "StrongPass123!"
    ADMIN_FULL_NAME: str = "Super Admin User"

    # Logging
    LOG_LEVEL: str = "INFO"
    GRAYLOG_HOST: Optional[str] = None
    GRAYLOG_PORT: int = 12201

    @field_validator("LOG_LEVEL")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {v!r}")
        return level

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        # Empty variables fall back to the defaults above
        env_ignore_empty=True,
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Settings resolved once per process"""
    return Settings()
