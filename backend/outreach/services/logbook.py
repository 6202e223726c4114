# outreach/services/logbook.py
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.orm import Session

from outreach.core.errors import ValidationError
from outreach.crud.clients import clean_text, get_client, increment_counters
from outreach.crud.interactions import log_interaction as insert_interaction
from outreach.db.guard import store_call
from outreach.models.client import Client
from outreach.models.interaction import Interaction
from outreach.schemas.interactions import InteractionCreate
from outreach.services.intake import worker_display_name
from outreach.services.legacy import parse_timestamp
from outreach.services.location import best_effort_location

logger = logging.getLogger(__name__)

# value -> label, in the order the logging dialog lists them
INTERACTION_TYPES: Dict[str, str] = {
    "contact": "Check-in / Contact",
    "service": "Service Provided",
    "referral": "Referral Made",
    "follow_up": "Follow-up",
    "assessment": "Assessment",
    "transport": "Transportation",
    "emergency": "Emergency Response",
}


def _now() -> datetime:
    return datetime.utcnow()


def contact_timestamp(payload: InteractionCreate, *, now: Optional[datetime] = None) -> datetime:
    """
    Explicit timestamp, else the picked day at the current time of day, else
    now. Everything is UTC: the picked day is a UTC day and aware values are
    converted.
    """
    now = now or _now()
    if payload.interaction_date is not None:
        return parse_timestamp(payload.interaction_date)
    if payload.contact_date is not None:
        return datetime.combine(payload.contact_date, now.time())
    return now


@dataclass
class LoggedInteraction:
    interaction: Interaction
    client: Client
    location_warning: Optional[str] = None


def log_client_interaction(db: Session, client_id: str, payload: InteractionCreate) -> LoggedInteraction:
    """
    Insert an interaction and bump the client's counters in one transaction.
    Raises ValidationError, ClientNotFound or StoreError.
    """
    type_ = clean_text(payload.interaction_type)
    notes = clean_text(payload.notes)
    if not type_ or not notes:
        raise ValidationError("Please fill in all required fields")
    if type_ not in INTERACTION_TYPES:
        raise ValidationError(
            f"Unknown interaction type '{type_}'; expected one of {', '.join(INTERACTION_TYPES)}"
        )

    with store_call(db, "load client"):
        client = get_client(db, client_id)

    ts = contact_timestamp(payload)
    location, warning = best_effort_location(payload.location, payload.location_error, context="interaction")

    with store_call(db, "save interaction"):
        evt = insert_interaction(
            db,
            client_id=client.id,
            type_=type_,
            interaction_date=ts,
            worker_id=clean_text(payload.worker_id),
            worker_name=worker_display_name(payload),
            notes=notes,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            accuracy=location.accuracy if location else None,
        )
        increment_counters(db, client.id, ts)
        db.commit()
        db.refresh(client)
        db.refresh(evt)

    logger.info("[interactions] client=%s type=%s contacts=%s", client.id, type_, client.contacts)
    return LoggedInteraction(interaction=evt, client=client, location_warning=warning)
