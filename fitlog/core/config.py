"""
Application configuration.
All values loaded from environment variables.
"""
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://postgres:postgres@db:5432/fitlog"
    DATABASE_ECHO: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or console

    # Analytics
    # Default window (days) for the daily stats query when no range is given
    DAILY_STATS_DEFAULT_DAYS: int = 30
    # Fold each newly logged workout into the user's summary right away
    ANALYTICS_FOLD_ON_LOG: bool = True
    # Maximum wait for the per-user fold lock before giving up
    ANALYTICS_LOCK_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
