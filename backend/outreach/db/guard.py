# backend/outreach/db/guard.py
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from outreach.core.errors import StoreError

logger = logging.getLogger(__name__)


@contextmanager
def store_call(db: Session, action: str) -> Iterator[Session]:
    """
    Wrap a unit of store work. Driver failures roll the session back and come
    out as StoreError("Failed to <action>: <driver message>").
    """
    try:
        yield db
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("[store] %s failed", action)
        detail = getattr(exc, "orig", None) or exc
        raise StoreError(f"Failed to {action}: {detail}") from exc
