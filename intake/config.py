"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - HTTP_PORT defaults to 8080; every other setting has a working default
    - OPS_INTERVAL_SECONDS=0 turns the process stats log off

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - Upload limit and field name live here so tests and deployments can tune them
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from intake.core.domain_types import MAX_UPLOAD_BYTES, UPLOAD_FIELD_NAME


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # HTTP
    http_host: str = "0.0.0.0"
    http_port: int = 8080

    # Uploads
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    upload_field_name: str = UPLOAD_FIELD_NAME

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "DEBUG"
    log_format: str = "json"
    ops_interval_seconds: float = 5.0

    @field_validator("http_port")
    @classmethod
    def check_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("http_port must be between 1 and 65535")
        return v

    @field_validator("max_upload_bytes")
    @classmethod
    def check_upload_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_upload_bytes must be positive")
        return v

    @field_validator("ops_interval_seconds")
    @classmethod
    def check_ops_interval(cls, v: float) -> float:
        if v < 0:
            raise ValueError("ops_interval_seconds must not be negative")
        return v

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
