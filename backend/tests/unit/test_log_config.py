"""Unit tests for per-category logging levels."""

import logging

from orgforms.config import Settings
from orgforms.infrastructure.logging.log_config import setup_logging


def test_category_levels_are_applied():
    settings = Settings(
        _env_file=None,
        log_level="WARNING",
        log_level_sql="ERROR",
        log_level_query="DEBUG",
        log_level_audit="info",
    )
    applied = setup_logging(settings)

    assert applied[""] == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR
    assert logging.getLogger("orgforms.application.services.org_query_service").level == logging.DEBUG
    assert logging.getLogger("orgforms.application.services.audit_recorder").level == logging.INFO


def test_unknown_level_name_falls_back_to_info():
    applied = setup_logging(Settings(_env_file=None, log_level_uvicorn="chatty"))
    assert applied["uvicorn.access"] == logging.INFO
