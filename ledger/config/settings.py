from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "sovereign_ledger"
    db_username: str = "ledger"
    db_password: str = "secret"

    # Record numbers and stamp timestamps both use this zone.
    timezone: str = "UTC"

    stamp_engine: str = "pymupdf"
    stamp_batch_size: int = Field(default=10, ge=1)

    storage_disk: str = "local"
    files_root: str = "/app/files"
    public_base_url: str = "http://localhost:8080"

    max_record_number_attempts: int = Field(default=3, ge=1)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone '{value}'") from exc
        return value

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)
