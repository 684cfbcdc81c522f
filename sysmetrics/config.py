"""Environment settings for the sysmetrics agent."""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Agent settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_prefix="SYSMETRICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Reporting
    report_interval: int = 5
    sample_interval: float = 1.0

    # Collection endpoint
    api_host: str = "localhost"
    api_port: int = 8080
    timeout: float = 5.0

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None
