# outreach/api/routes/interactions.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from outreach.api.errors import to_http
from outreach.core.config import settings
from outreach.core.errors import OutreachError
from outreach.db.session import get_db
from outreach.schemas.clients import ReconcileResult
from outreach.schemas.interactions import InteractionTypes, LegacyImport, LegacyImportResponse
from outreach.services.logbook import INTERACTION_TYPES
from outreach.services.reconcile import import_legacy_interactions, reconcile_all

router = APIRouter(tags=["interactions"])


@router.get("/interactions/types", response_model=InteractionTypes)
def interaction_types():
    return {
        "types": [{"value": k, "label": v} for k, v in INTERACTION_TYPES.items()],
        "recent_limit": settings.RECENT_INTERACTIONS_LIMIT,
        "geolocation_timeout_seconds": settings.GEOLOCATION_TIMEOUT_SECONDS,
    }


# POST /api/interactions/import (one-time migration of old rows)
@router.post("/interactions/import", response_model=LegacyImportResponse)
def import_interactions(payload: LegacyImport, db: Session = Depends(get_db)):
    try:
        return import_legacy_interactions(db, payload.rows)
    except OutreachError as exc:
        raise to_http(exc) from exc


# POST /api/maintenance/reconcile
@router.post("/maintenance/reconcile", response_model=ReconcileResult)
def reconcile_everything(db: Session = Depends(get_db)):
    try:
        return reconcile_all(db)
    except OutreachError as exc:
        raise to_http(exc) from exc
