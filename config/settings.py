"""
Application settings and configuration
"""
from functools import lru_cache

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings from environment variables"""

    # Business calendar
    BUSINESS_TIMEZONE: str = Field(default="UTC")
    SLOT_STEP_MINUTES: int = Field(default=15, gt=0)

    # Booking lead time
    ALLOW_SAME_DAY_BOOKING: bool = Field(default=True)
    MIN_NOTICE_HOURS: int = Field(default=24, ge=0)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator('BUSINESS_TIMEZONE')
    @classmethod
    def validate_timezone(cls, v):
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
