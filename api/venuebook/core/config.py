"""Application configuration from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_name: str = "VenueBook"
    debug: bool = True
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Every booking day boundary and "is past" check is evaluated here
    business_timezone: str = "Asia/Tashkent"

    # Venue defaults, applied when a stored venue leaves them blank
    default_open_time: str = "09:00"
    default_close_time: str = "17:00"
    default_minimum_hours: float = 1
    default_cooldown_minutes: int = 0

    model_config = {"env_prefix": "VB_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
