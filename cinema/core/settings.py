from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    JWT_ISSUER: str | None = None
    JWT_ALGORITHM: str = "HS256"
    ADMIN_ROLE: str = "admin"
    MAX_PAGE_SIZE: int = 100

    SQL_ECHO: bool = False
    CREATE_TABLES_ON_STARTUP: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("DATABASE_URL")
    def validate_database_url(cls, v):
        if not v or not v.startswith(
            ("postgresql://", "postgres://", "postgresql+asyncpg://", "sqlite")
        ):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL or SQLite connection string"
            )
        return v

    @field_validator("SECRET_KEY")
    def validate_secret_key(cls, v):
        if not v:
            raise ValueError("SECRET_KEY must not be empty")
        return v

    @field_validator("LOG_LEVEL")
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("LOG_LEVEL must be a standard logging level name")
        return level


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process from the environment."""
    return Settings()
