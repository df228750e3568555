"""Per-category logging levels.

SQL echo, uvicorn access lines, the org merge engine and the audit trail
each get their own level in Settings, so one of them can be turned up to
DEBUG without flooding the rest.

Usage:
    from orgforms.infrastructure.logging.log_config import setup_logging
    setup_logging()   # once, from the FastAPI lifespan
"""

import logging
import sys

from orgforms.config import Settings, get_settings

_QUERY_LOGGERS = (
    "orgforms.application.services.org_query_service",
    "orgforms.application.services.record_service",
    "orgforms.infrastructure.database.repositories.sqlalchemy_document_store",
)

_AUDIT_LOGGERS = (
    "orgforms.application.services.audit_recorder",
    "orgforms.application.services.audit_log_service",
)

# Settings field -> logger names it controls
_CATEGORY_MAP: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "asyncpg"),
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_query": _QUERY_LOGGERS,
    "log_level_audit": _AUDIT_LOGGERS,
}

_DEV_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
_DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(settings: Settings | None = None) -> dict[str, int]:
    """Apply the configured levels and return them keyed by logger name ("" is root)."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    # uvicorn installs its own handlers; bare scripts and tests do not
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        fmt = _DEV_FORMAT if settings.app_env == "development" else _DEFAULT_FORMAT
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    applied = {"": root.level}
    for field, names in _CATEGORY_MAP.items():
        level = _parse_level(getattr(settings, field, "INFO"))
        for name in names:
            logging.getLogger(name).setLevel(level)
            applied[name] = level

    logging.getLogger(__name__).debug(
        "Logging configured: %s",
        ", ".join(f"{field}={getattr(settings, field)}" for field in ("log_level", *_CATEGORY_MAP)),
    )
    return applied


def _parse_level(raw: str) -> int:
    """Level name to logging constant; unknown names fall back to INFO."""
    numeric = logging.getLevelName(raw.strip().upper())
    return numeric if isinstance(numeric, int) else logging.INFO
