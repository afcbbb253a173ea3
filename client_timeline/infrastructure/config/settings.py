from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "Client Timeline"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./timeline.db"
    database_echo: bool = False

    # Timeline policy
    max_lines: int = 10
    max_events_per_line: int = 20
    description_max_length: int = 150
    default_icon_size: str = "text-2xl"
    placeholder_icon: str = "📋"
    placeholder_description: str = "New event"

    # Sync controller windows (milliseconds)
    sync_suppression_window_ms: int = 300
    sync_debounce_interval_ms: int = 500

    # Change feed
    change_feed_backend: str = "memory"  # Options: "memory", "redis"
    change_feed_channel_prefix: str = "timeline_changes"

    # Redis (change feed backend)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str | None = None

    # OpenTelemetry
    telemetry_enabled: bool = True

    @model_validator(mode="after")
    def validate_timeline_config(self) -> "Settings":
        """Validate change feed backend and timeline policy values"""
        if self.change_feed_backend not in ("memory", "redis"):
            raise ValueError(
                f"Invalid change_feed_backend '{self.change_feed_backend}'. "
                f"Must be one of: 'memory', 'redis'"
            )
        if self.max_lines < 1:
            raise ValueError("max_lines must be at least 1")
        if self.max_events_per_line < 1:
            raise ValueError("max_events_per_line must be at least 1")
        if self.sync_suppression_window_ms <= 0 or self.sync_debounce_interval_ms <= 0:
            raise ValueError("Sync suppression window and debounce interval must be positive")
        return self

    @property
    def sync_suppression_window(self) -> float:
        """Suppression window in seconds"""
        return self.sync_suppression_window_ms / 1000

    @property
    def sync_debounce_interval(self) -> float:
        """Debounce interval in seconds"""
        return self.sync_debounce_interval_ms / 1000

    model_config = SettingsConfigDict(
        env_prefix="TIMELINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
