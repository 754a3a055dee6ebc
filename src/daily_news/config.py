"""Configuration management using Pydantic Settings"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with validation"""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="DAILY_NEWS_", case_sensitive=False
    )

    # Schedule: [hour, minute] of the daily push
    point: list[int] = Field(
        default=[8, 0],
        description="Hour and minute of the daily broadcast",
    )

    # Upstream
    api: str = Field(
        default="https://ravelloh.github.io/EverydayNews/latest.jpg",
        description="Primary upstream endpoint for today's image",
    )
    archive_url: str = Field(
        default="https://ravelloh.github.io/EverydayNews",
        description="Base URL of the historical image archive",
    )

    # Storage
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/news.db",
        description="Database connection URL",
    )
    data_dir: Path = Field(default=Path("./data"))
    database_echo: bool = Field(default=False)
    retention_days: int = Field(default=7, ge=1, le=365)

    # Network
    request_timeout: int = Field(default=30, ge=5, le=300)
    max_retries: int = Field(default=3, ge=1, le=10)
    retry_delay: float = Field(default=1.0, ge=0.1, le=60.0)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    @field_validator("point")
    @classmethod
    def check_point(cls, v: list[int]) -> list[int]:
        """Require exactly [hour, minute] within 24-hour clock bounds"""
        if len(v) != 2:
            raise ValueError("point must be [hour, minute]")
        hour, minute = v
        if not 0 <= hour <= 24:
            raise ValueError(f"hour must be between 0 and 24, got {hour}")
        if not 0 <= minute <= 59:
            raise ValueError(f"minute must be between 0 and 59, got {minute}")
        return v

    def create_directories(self) -> None:
        """Ensure all required directories exist"""
        self.data_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
