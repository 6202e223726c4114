# backend/outreach/core/logging.py
import logging

from outreach.core.config import Settings


def configure_logging(cfg: Settings) -> None:
    """Root logger setup, called once from the app factory."""
    level = getattr(logging, (cfg.LOG_LEVEL or "INFO").upper(), logging.INFO)
    logging.basicConfig(level=level, format=cfg.LOG_FORMAT)
    # SQL echo only in debug
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if cfg.DEBUG else logging.WARNING)
