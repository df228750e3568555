from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Org Forms API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite:///./orgforms.db"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Bearer token verification (PyJWT)
    jwt_secret: str = "change-me"
    jwt_algorithms: list[str] = ["HS256"]
    jwt_audience: str | None = None
    jwt_issuer: str | None = None

    # Listings & queries
    page_size: int = 10
    array_contains_any_limit: int = 30   # Max values per ArrayContainsAny predicate

    # Audit log listing
    audit_log_default_limit: int = 100
    audit_log_max_limit: int = 500

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine: SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_query: str = "INFO"            # Org merge engine
    log_level_audit: str = "INFO"            # Audit recorder

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance: reads .env once."""
    return Settings()
