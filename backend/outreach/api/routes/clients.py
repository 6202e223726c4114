# outreach/api/routes/clients.py
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from outreach.api.errors import to_http
from outreach.core.config import settings
from outreach.core.errors import OutreachError
from outreach.crud.clients import get_client, list_clients, update_counters
from outreach.crud.interactions import list_for_client
from outreach.db.guard import store_call
from outreach.db.session import get_db
from outreach.schemas.clients import (
    ClientList,
    ClientOut,
    ClientSummary,
    CounterUpdate,
)
from outreach.schemas.interactions import (
    InteractionCreate,
    InteractionList,
    LoggedInteractionResponse,
)
from outreach.services.logbook import log_client_interaction
from outreach.services.reconcile import client_summary, reconcile_client
from outreach.services.roster import filter_clients

router = APIRouter(prefix="/clients", tags=["clients"])


# GET /api/clients?search=
@router.get("", response_model=ClientList)
def roster(search: str = Query("", alias="search"), db: Session = Depends(get_db)):
    try:
        with store_call(db, "load clients"):
            rows = list_clients(db)
    except OutreachError as exc:
        raise to_http(exc) from exc
    items = filter_clients(rows, search)
    return {"items": items, "total": len(items), "search": search}


# GET /api/clients/{id}
@router.get("/{id}", response_model=ClientOut)
def get_one(id: str, db: Session = Depends(get_db)):
    try:
        with store_call(db, "load client"):
            return get_client(db, id)
    except OutreachError as exc:
        raise to_http(exc) from exc


# POST /api/clients/{id}/counters (guarded by the caller's previous count)
@router.post("/{id}/counters", response_model=ClientOut)
def bump_counters(id: str, payload: CounterUpdate, db: Session = Depends(get_db)):
    try:
        with store_call(db, "update client"):
            update_counters(db, id, previous_contacts=payload.previous_contacts, contact_at=datetime.utcnow())
            db.commit()
            return get_client(db, id)
    except OutreachError as exc:
        raise to_http(exc) from exc


# GET /api/clients/{id}/summary
@router.get("/{id}/summary", response_model=ClientSummary)
def summary(id: str, db: Session = Depends(get_db)):
    try:
        return client_summary(db, id)
    except OutreachError as exc:
        raise to_http(exc) from exc


# POST /api/clients/{id}/reconcile
@router.post("/{id}/reconcile", response_model=ClientSummary)
def reconcile(id: str, db: Session = Depends(get_db)):
    try:
        return reconcile_client(db, id)
    except OutreachError as exc:
        raise to_http(exc) from exc


# GET /api/clients/{id}/interactions?limit=
@router.get("/{id}/interactions", response_model=InteractionList)
def interactions(
    id: str,
    limit: int | None = Query(None, ge=1, le=1000),
    recent: bool = Query(False),
    db: Session = Depends(get_db),
):
    if recent and limit is None:
        limit = settings.RECENT_INTERACTIONS_LIMIT
    try:
        with store_call(db, "load interactions"):
            get_client(db, id)
            items = list_for_client(db, id, limit=limit)
    except OutreachError as exc:
        raise to_http(exc) from exc
    return {"items": items, "client_id": id, "limit": limit}


# POST /api/clients/{id}/interactions
@router.post("/{id}/interactions", response_model=LoggedInteractionResponse, status_code=201)
def log_interaction(id: str, payload: InteractionCreate, db: Session = Depends(get_db)):
    try:
        res = log_client_interaction(db, id, payload)
    except OutreachError as exc:
        raise to_http(exc) from exc
    return {
        "interaction": res.interaction,
        "client": res.client,
        "location_warning": res.location_warning,
    }
