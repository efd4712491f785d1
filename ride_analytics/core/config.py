"""
Centralized configuration management with validation.

All environment variables are loaded and validated here.
This ensures the scorer, the aggregator and the training load analyzer
agree on units, preferences and targets.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal, Optional
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings with validation."""

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")  # json or text

    # Environment
    ENVIRONMENT: str = Field(default="development")

    # User preferences (normally supplied by the preference store)
    UNIT_SYSTEM: Literal["imperial", "metric"] = Field(default="imperial")
    # Centre of the ideal riding band, in the active unit.
    # None means 67.5°F (or its Celsius equivalent).
    IDEAL_TEMPERATURE: Optional[float] = Field(default=None)

    # Forecast window considered by the aggregator (hours)
    FORECAST_WINDOW_HOURS: int = Field(default=48, ge=1, le=48)

    # Weekly training target shown against trailing 7-day TSS
    WEEKLY_TSS_TARGET: int = Field(default=350, gt=0)


# Global settings instance
settings = Settings()
