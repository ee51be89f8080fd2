from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COACHCAL_",
        case_sensitive=False,
    )

    # App
    env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    db_url: str = "sqlite+aiosqlite:///./coachcal.db"

    # Scheduling defaults (used when a coach has not configured working hours)
    default_timezone: str = "America/New_York"
    default_start_time: str = "9:00 AM"
    default_end_time: str = "6:00 PM"
    default_slot_interval: int = 60

    # Recurrence
    recurrence_max_instances: int = 260
    recurrence_preview_limit: int = 10


def get_settings() -> Settings:
    return Settings()
