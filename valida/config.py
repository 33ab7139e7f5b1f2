from datetime import timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)
    LOG_EVALUATION: bool = False  # Debug-log failed top-level parses

    # Coercion
    EPOCH_TIMEZONE: str = "UTC"  # IANA zone for Unix-epoch conversions

    model_config = SettingsConfigDict(env_prefix="VALIDA_", env_file=".env", extra="ignore")

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS: raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("EPOCH_TIMEZONE")
    @classmethod
    def _known_zone(cls, value: str) -> str:
        if value.upper() == "UTC": return "UTC"
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {value}") from e
        return value

    @property
    def epoch_tz(self) -> tzinfo:
        return timezone.utc if self.EPOCH_TIMEZONE == "UTC" else ZoneInfo(self.EPOCH_TIMEZONE)


@lru_cache
def get_settings() -> Settings:
    return Settings()
