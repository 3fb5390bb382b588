"""
Settings and configuration for the Scheduling Service.
"""

from services.common.settings import (
    AliasChoices,
    BaseSettings,
    SettingsConfigDict,
    field,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    db_url_scheduling: str = field(
        default="sqlite:///./scheduling.db",
        description="Database connection string for the scheduling service",
        validation_alias=AliasChoices("DB_URL_SCHEDULING"),
    )

    # Free-slot search
    business_hours_start: int = field(
        default=9,
        description="First hour (inclusive) a free slot may start at",
        validation_alias=AliasChoices("BUSINESS_HOURS_START"),
    )
    business_hours_end: int = field(
        default=17,
        description="Hour (exclusive) by which a free slot must have started",
        validation_alias=AliasChoices("BUSINESS_HOURS_END"),
    )
    search_horizon_days: int = field(
        default=7,
        description="Number of days after today covered by the free-slot search",
        validation_alias=AliasChoices("SEARCH_HORIZON_DAYS"),
    )
    slot_step_minutes: int = field(
        default=30,
        description="Granularity of candidate slot start times in minutes",
        validation_alias=AliasChoices("SLOT_STEP_MINUTES"),
    )

    # Booking
    prevent_double_booking: bool = field(
        default=False,
        description="Reject bookings whose owner or participants are already busy",
        validation_alias=AliasChoices("PREVENT_DOUBLE_BOOKING"),
    )

    # Logging configuration
    log_level: str = field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias=AliasChoices("LOG_LEVEL"),
    )
    log_format: str = field(
        default="json",
        description="Log format (json or text)",
        validation_alias=AliasChoices("LOG_FORMAT"),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
