# taskapi/core/config.py
"""
Application settings.

Everything is read from environment variables (or a local .env file) by
pydantic-settings, so the same code runs in dev, tests and production.
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(
        default="sqlite:///db.sqlite",
        alias="DATABASE_URL",
        description="SQLAlchemy database URL",
    )

    jwt_secret: str = Field(
        default="change-me-in-production-please-0123456789",
        alias="JWT_SECRET",
        description="Secret used to sign access tokens",
    )
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expires_minutes: int = Field(default=60, alias="JWT_EXPIRES_MINUTES", ge=1)

    bcrypt_rounds: int = Field(
        default=10,
        alias="BCRYPT_ROUNDS",
        ge=4,
        le=31,
        description="bcrypt cost factor for password hashing",
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    cors_origins: List[str] = Field(default=["*"], alias="CORS_ORIGINS")


@lru_cache
def get_settings() -> Settings:
    return Settings()
