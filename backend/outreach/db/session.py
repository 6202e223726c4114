# backend/outreach/db/session.py
from __future__ import annotations

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from outreach.core.config import settings


def make_engine(url: str, **kwargs) -> Engine:
    url = url.strip()
    connect_args = kwargs.pop("connect_args", {})
    if url.startswith("sqlite"):
        # Needed so SQLite works in multi-threaded FastAPI
        connect_args.setdefault("check_same_thread", False)
    return create_engine(
        url,
        pool_pre_ping=True,          # drops dead connections
        future=True,
        connect_args=connect_args,
        **kwargs,
    )


# -------------------------------------------------------
# Engine & Session factory
# -------------------------------------------------------
engine = make_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=Session,
    future=True,
)


# -------------------------------------------------------
# FastAPI dependency
# -------------------------------------------------------
def get_db() -> Generator[Session, None, None]:
    """
    Usage in routes:
        from outreach.db.session import get_db
        def endpoint(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
