"""Application configuration from environment variables."""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_name: str = "VenueLedger"
    debug: bool = True
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Snapshot storage
    store_backend: Literal["memory", "database"] = "database"
    database_url: str = "sqlite+aiosqlite:///./venueledger.db"
    database_echo: bool = False
    snapshot_key: str = "default"

    # Reject saves whose loaded version is no longer current (off = last write wins)
    enforce_snapshot_version: bool = False

    # Acting user when the request does not name one
    default_actor_id: str = "admin-1"

    # Booking conflict detection: exact start time match, or half-open interval overlap
    conflict_mode: Literal["exact_start", "overlap"] = "exact_start"

    # Raise instead of picking the first candidate when a payment match is ambiguous
    strict_payment_matching: bool = False

    model_config = {"env_prefix": "VL_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
