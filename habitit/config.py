"""Application configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Day boundaries (IANA zone name, None = system local time)
    timezone: Optional[str] = None

    # Storage
    data_path: str = "data/habits.json"

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 8000

    # Analytics
    rolling_window_days: int = 7
    calendar_days: int = 365
    mock_history_days: int = 90

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="HABITIT_",
        env_file=".env",
        case_sensitive=False,
    )


settings = Settings()
