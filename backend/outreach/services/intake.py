# outreach/services/intake.py
"""
Intake workflow: validate, derive one encounter timestamp, then write the
client and its first interaction in the same transaction.

Two form variants feed it. The generic form writes the basic description
fields; the SDRM form writes a larger superset and gets an age bucket derived
from the age. Both record an "Initial Intake" interaction so a new client
always starts with contacts == 1 and one matching interaction row.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Optional, Tuple, Union

from sqlalchemy.orm import Session

from outreach.core.errors import ValidationError
from outreach.crud.clients import clean_text, insert_client
from outreach.crud.interactions import log_interaction
from outreach.db.guard import store_call
from outreach.models.client import Client
from outreach.models.interaction import Interaction
from outreach.schemas.clients import ClientIntakeCreate, LocationIn, SDRMIntakeCreate, WorkerIn
from outreach.services.location import best_effort_location

logger = logging.getLogger(__name__)

INITIAL_INTAKE = "Initial Intake"
UNKNOWN_WORKER = "Unknown Worker"

GENERIC_FIELDS = (
    "first_name", "middle", "last_name", "aka", "gender", "ethnicity", "age",
    "height", "weight", "hair", "eyes", "description", "notes",
)
SDRM_FIELDS = GENERIC_FIELDS + (
    "race", "sexual_orientation", "dependents_under_18", "veteran_status", "disabled",
    "disabled_details", "phone", "email", "date_first_contact", "date_last_contact",
    "location_initial_contact", "city_prior_to_vista", "length_in_vista",
    "living_situation", "housing_barrier", "exit_destination", "shelter_destination",
    "service_referrals", "referred_from", "new_to_sdrm", "ongoing_count", "ucs_count",
)

# (inclusive upper bound, label)
AGE_BUCKETS = (
    (17, "Under 18"),
    (24, "18-24"),
    (34, "25-34"),
    (44, "35-44"),
    (54, "45-54"),
    (64, "55-64"),
)
AGE_RANGE_OPTIONS = tuple(label for _, label in AGE_BUCKETS) + ("65+",)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _now() -> datetime:
    return datetime.utcnow()


def calculate_age_range(age: Union[str, int, float, None]) -> str:
    """Age bucket label, or "" when the age is not a number ("30 years" reads as 30)."""
    if age is None or isinstance(age, bool):
        return ""
    if isinstance(age, float):
        if not math.isfinite(age):
            return ""
        n = int(age)
    elif isinstance(age, int):
        n = age
    else:
        m = _LEADING_INT.match(str(age))
        if not m:
            return ""
        n = int(m.group(1))
    for upper, label in AGE_BUCKETS:
        if n <= upper:
            return label
    return "65+"


def worker_display_name(worker: WorkerIn) -> str:
    """Explicit name, else the e-mail local part, else "Unknown Worker"."""
    name = clean_text(worker.worker_name)
    if name:
        return name
    email = clean_text(worker.worker_email)
    if email:
        local = email.split("@")[0].strip()
        if local:
            return local
    return UNKNOWN_WORKER


def encounter_timestamp(
    encounter_date: Optional[date], encounter_time: Optional[time], *, now: Optional[datetime] = None
) -> Tuple[datetime, bool]:
    """
    (timestamp, backdated). A supplied date (with optional time, default
    00:00) wins over the clock; a time alone is rejected. The supplied values
    are taken as UTC, the same as the clock.
    """
    if encounter_date is None:
        if encounter_time is not None:
            raise ValidationError("Encounter time given without an encounter date")
        return (now or _now()), False
    ts = datetime.combine(encounter_date, encounter_time or time(0, 0))
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts, True


def validate_names(first_name: Optional[str], last_name: Optional[str]) -> Tuple[str, str]:
    first, last = clean_text(first_name), clean_text(last_name)
    if not first or not last:
        raise ValidationError("First name and last name are required")
    return first, last


def _location_sentence(location: Optional[LocationIn]) -> str:
    return "Location captured." if location else "Location not available."


def _generic_notes(payload: ClientIntakeCreate, ts: datetime, backdated: bool,
                   location: Optional[LocationIn]) -> str:
    parts = ["Client intake completed"]
    if backdated:
        parts.append(f" (Backdated to {ts.strftime('%B %d, %Y %I:%M %p')})")
    parts.append(f". {_location_sentence(location)}")
    notes = clean_text(payload.notes)
    if notes:
        parts.append(f" Notes: {notes}")
    return "".join(parts).strip()


def _sdrm_notes(payload: SDRMIntakeCreate, location: Optional[LocationIn]) -> str:
    where = clean_text(payload.location_initial_contact) or "Not specified"
    return f"Initial intake completed. Location: {where}. {_location_sentence(location)}"


@dataclass
class IntakeResult:
    client: Client
    interaction: Interaction
    location_warning: Optional[str] = None


def _client_values(payload: ClientIntakeCreate, fields: Tuple[str, ...]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for name in fields:
        v = getattr(payload, name, None)
        values[name] = clean_text(v) if isinstance(v, str) else v
    return values


def intake_client(db: Session, payload: ClientIntakeCreate, *, variant: str = "generic") -> IntakeResult:
    """Create a client and its first interaction. Raises ValidationError / StoreError."""
    sdrm = variant == "sdrm"
    if sdrm and not isinstance(payload, SDRMIntakeCreate):
        raise ValidationError("SDRM intake needs the SDRM form fields")

    first, last = validate_names(payload.first_name, payload.last_name)
    ts, backdated = encounter_timestamp(payload.encounter_date, payload.encounter_time)
    location, warning = best_effort_location(payload.location, payload.location_error, context="intake")

    values = _client_values(payload, SDRM_FIELDS if sdrm else GENERIC_FIELDS)
    values.update(
        first_name=first,
        last_name=last,
        intake_variant=variant,
        created_by=clean_text(payload.worker_id),
        contacts=1,
        last_contact=ts,
        date_created=ts.date(),
        created_at=ts,
        location_lat=location.latitude if location else None,
        location_lng=location.longitude if location else None,
    )
    if sdrm:
        values["age_range"] = calculate_age_range(payload.age)
        values["date_first_contact"] = payload.date_first_contact or ts.date()
        values["date_last_contact"] = payload.date_last_contact or ts.date()
        notes = _sdrm_notes(payload, location)
    else:
        notes = _generic_notes(payload, ts, backdated, location)

    with store_call(db, "save client"):
        client = insert_client(db, values)
        interaction = log_interaction(
            db,
            client_id=client.id,
            type_=INITIAL_INTAKE,
            interaction_date=ts,
            created_at=ts,
            worker_id=clean_text(payload.worker_id),
            worker_name=worker_display_name(payload),
            notes=notes,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            accuracy=location.accuracy if location else None,
        )
        db.commit()
        db.refresh(client)
        db.refresh(interaction)

    logger.info("[intake] %s client=%s backdated=%s location=%s",
                variant, client.id, backdated, bool(location))
    return IntakeResult(client=client, interaction=interaction, location_warning=warning)
