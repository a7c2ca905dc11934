from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Cuadrante API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite:///./cuadrante.db"
    database_echo: bool = False
    cors_origins: list[str] = ["*"]

    # Image uploads (served back under uploads_url_prefix)
    upload_dir: str = "uploads"
    uploads_url_prefix: str = "/uploads"
    max_upload_size_mb: int = 10

    # Seeded on startup when the users table is empty
    default_admin_name: str = "Gustavo"
    default_admin_identifier: str = "3434"

    # Sync bus — events buffered per connected client before it is dropped
    sse_queue_size: int = 256

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine — SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_sync: str = "INFO"             # sync bus + client listener

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
