# backend/outreach/scheduler.py
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI
from sqlalchemy.orm import Session

from outreach.core.config import settings
from outreach.core.errors import StoreError
from outreach.db.session import SessionLocal
from outreach.services.reconcile import reconcile_all

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler(timezone="UTC")


def _reconcile_job() -> dict:
    """
    Periodic sweep that rebuilds contacts/last_contact from the interaction
    log for any client whose stored counters drifted.
    """
    with SessionLocal() as db:  # type: Session
        try:
            return reconcile_all(db)
        except StoreError:
            # already logged by the store guard; next run retries
            return {"checked": 0, "fixed": 0}


def init_scheduler(app: FastAPI) -> None:
    """Attach scheduler start/stop to FastAPI lifecycle."""
    @app.on_event("startup")
    def _start_scheduler():
        if not settings.RECONCILE_ENABLED:
            logger.info("[reconcile] sweep disabled by env")
            return
        # coalesce to run once if missed, and avoid overlap
        scheduler.add_job(
            _reconcile_job, "interval",
            minutes=settings.RECONCILE_INTERVAL_MIN,
            id="reconcile_counters", replace_existing=True,
            max_instances=1, coalesce=True,
        )
        try:
            scheduler.start()
            logger.info("[reconcile] sweep started (every %d min)", settings.RECONCILE_INTERVAL_MIN)
        except Exception:
            # If scheduler cannot start, keep the API running
            logger.exception("[reconcile] scheduler failed to start")

    @app.on_event("shutdown")
    def _stop_scheduler():
        if scheduler.running:
            scheduler.shutdown(wait=False)
