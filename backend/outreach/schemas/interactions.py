from datetime import date, datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_serializer

from outreach.schemas.clients import ClientOut, LocationIn, WorkerIn, utc_iso

# ---------- OUT MODELS ----------
class InteractionOut(BaseModel):
    id: str
    client_id: str
    legacy_id: Optional[str] = None
    worker_id: Optional[str] = None
    worker_name: Optional[str] = None
    interaction_type: str
    notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy: Optional[float] = None
    interaction_date: datetime
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_serializer("interaction_date", "created_at", when_used="json-unless-none")
    def as_utc(self, v: datetime) -> str:
        return utc_iso(v)

class InteractionList(BaseModel):
    items: List[InteractionOut]
    client_id: str
    limit: Optional[int] = None

class InteractionTypeOption(BaseModel):
    value: str
    label: str

class InteractionTypes(BaseModel):
    types: List[InteractionTypeOption]
    recent_limit: int
    geolocation_timeout_seconds: int

# POST response wrappers
class IntakeResponse(BaseModel):
    created: bool
    client: ClientOut
    interaction: InteractionOut
    location_warning: Optional[str] = None

class LoggedInteractionResponse(BaseModel):
    interaction: InteractionOut
    client: ClientOut
    location_warning: Optional[str] = None

class LegacyImportResponse(BaseModel):
    imported: int
    skipped: List[Dict[str, Any]]
    reconciled: int


# ---------- IN MODELS ----------
class InteractionCreate(WorkerIn):
    interaction_type: Optional[str] = Field(default=None, alias="type")
    notes: Optional[str] = None
    # operator-picked UTC day; the time of day is taken from the UTC clock
    contact_date: Optional[date] = Field(default=None, alias="date", description="UTC day of the contact")
    # explicit event time, wins over `date`; naive values are read as UTC
    interaction_date: Optional[datetime] = None

    location: Optional[LocationIn] = None
    location_error: Optional[str] = None

    class Config:
        populate_by_name = True  # accept "type"/"date" or the field names
        extra = "ignore"

class LegacyImport(BaseModel):
    """Raw interaction rows exported from the old store, in either naming convention."""
    rows: List[Dict[str, Any]]
