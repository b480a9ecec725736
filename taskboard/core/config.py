# taskboard/core/config.py
"""
Application configuration - single source of truth for all settings.
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """
    # Project Info
    PROJECT_NAME: str = "Taskboard API"
    VERSION: str = "1.0.0"
    PORT: int = 8000
    DEBUG: bool = False

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Database (MongoDB)
    MONGO_URL: str = "mongodb://localhost:27017"
    DB_NAME: str = "taskboard"

    # Security (Defaults provided for dev, MUST be overridden in prod)
    JWT_SECRET: str = "development_secret_key_change_me"
    JWT_ALGORITHM: str = "HS256"

    # Rate limiting, e.g. "50/minute"
    RATE_LIMIT: str = "100/minute"
    RATE_LIMIT_ENABLED: bool = True

    class Config:
        case_sensitive = True
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
