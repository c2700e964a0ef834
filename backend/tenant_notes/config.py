"""
Configuration settings using Pydantic Settings.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    NOTES_STORE: str = "inmemory"

    DYNAMODB_TABLE_NAME: str = ""
    AWS_REGION: str = ""
    DYNAMODB_ENDPOINT_URL: Optional[str] = None
    DYNAMODB_CONNECT_TIMEOUT_SECONDS: float = 2.0
    DYNAMODB_READ_TIMEOUT_SECONDS: float = 5.0
    DYNAMODB_MAX_ATTEMPTS: int = 1

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    DEBUG: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    :return: Cached Settings instance
    :rtype: Settings
    """
    return Settings()


settings = get_settings()
