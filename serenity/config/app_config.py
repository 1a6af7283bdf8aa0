from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class AppConfig(BaseSettings):
    """Application configuration settings."""

    # Environment
    app_env: str = Field("development")
    app_debug: bool = Field(False)
    app_host: str = Field("0.0.0.0")
    app_port: int = Field(3001)

    # Logging
    log_level: str = Field("INFO")
    log_file: Optional[str] = Field(None)

    # Persistence
    data_dir: str = Field("data")

    # Pipeline redelivery
    pipeline_max_attempts: int = Field(3)
    pipeline_retry_delay: float = Field(0.0)

    @field_validator("app_env")
    def validate_app_env(cls, value: str) -> str:
        if value not in ["development", "staging", "production", "test"]:
            raise ValueError("APP_ENV must be development, staging, production, or test")
        return value

    @field_validator("log_level")
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError("LOG_LEVEL must be a valid Loguru level")
        return level

    @field_validator("pipeline_max_attempts")
    def validate_max_attempts(cls, value: int) -> int:
        if value < 1:
            raise ValueError("PIPELINE_MAX_ATTEMPTS must be at least 1")
        return value

    @field_validator("pipeline_retry_delay")
    def validate_retry_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("PIPELINE_RETRY_DELAY must not be negative")
        return value

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache()
def get_app_config() -> AppConfig:
    """Return a cached application configuration instance."""

    return AppConfig()
