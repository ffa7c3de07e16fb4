"""Application configuration managed via environment variables."""
from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Weekday Planner"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://planner@localhost:5432/weekday_planner"
    cors_origins: List[str] = ["*"]

    schedule_policy: Literal["split_study", "fixed_bath"] = "split_study"
    arrival_minute_step: int = 10
    study_minutes_min: int = 30
    study_minutes_max: int = 60
    study_minutes_step: int = Field(default=5, gt=0)

    scheduler_enabled: bool = False
    # Reminder times are wall-clock "HH:MM"; unset follows the host's local zone.
    scheduler_timezone: str | None = None
    dispatch_run_on_startup: bool = False

    notifications_enabled: bool = False
    notifications_provider: str = "webpush"
    vapid_public_key: str | None = None
    vapid_private_key: str | None = None
    vapid_subject: str = "mailto:planner@example.com"
    notification_title: str = "Weekday Planner"
    notification_icon: str = "/icon.svg"
    fired_retention_hours: int = 24

    analytics_default_days: int = 30

    api_base_url: str = "http://localhost:8000"
    client_timeout_seconds: float = 10.0
    client_max_retries: int = 2
    client_backoff_seconds: float = 0.5

    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "weekday-planner"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
