"""Logging configuration for the Workboard application"""
import logging
import sys

from src.infrastructure.config.settings import get_settings
from src.shared.context import get_request_context


class RequestContextFilter(logging.Filter):
    """Stamp each record with the authenticated caller of the current request"""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = get_request_context()
        record.user_id = ctx.user_id if ctx.user_id is not None else "-"
        record.company_id = ctx.company_id if ctx.company_id is not None else "-"
        return True


def setup_logging():
    """Configure application-wide logging"""
    log_level = logging.DEBUG if get_settings().debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [user=%(user_id)s company=%(company_id)s] %(message)s",
        handlers=[handler],
    )
    # SQL echo is controlled by DATABASE_ECHO, not the root level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get logger for module"""
    return logging.getLogger(name)
