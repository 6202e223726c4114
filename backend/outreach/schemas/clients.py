from datetime import date, datetime, time
from typing import List, Optional
from pydantic import BaseModel, Field, field_serializer


def utc_iso(dt: datetime) -> str:
    """Stored timestamps are naive UTC; say so on the wire."""
    return dt.isoformat() + "Z" if dt.tzinfo is None else dt.isoformat()

# ---------- SHARED ----------
class LocationIn(BaseModel):
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


class WorkerIn(BaseModel):
    """Who is logging the record. Display name falls back to the e-mail local part."""
    worker_id: Optional[str] = None
    worker_email: Optional[str] = None
    worker_name: Optional[str] = None


# ---------- OUT MODELS ----------
class ClientOut(BaseModel):
    id: str
    first_name: str
    middle: Optional[str] = None
    last_name: str
    aka: Optional[str] = None

    gender: Optional[str] = None
    ethnicity: Optional[str] = None
    age: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    hair: Optional[str] = None
    eyes: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None

    race: Optional[str] = None
    age_range: Optional[str] = None
    sexual_orientation: Optional[str] = None
    dependents_under_18: Optional[int] = None
    veteran_status: Optional[bool] = None
    disabled: Optional[bool] = None
    disabled_details: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    date_first_contact: Optional[date] = None
    date_last_contact: Optional[date] = None
    location_initial_contact: Optional[str] = None
    city_prior_to_vista: Optional[str] = None
    length_in_vista: Optional[str] = None
    living_situation: Optional[str] = None
    housing_barrier: Optional[str] = None
    exit_destination: Optional[str] = None
    shelter_destination: Optional[str] = None
    service_referrals: Optional[List[str]] = None
    referred_from: Optional[str] = None
    new_to_sdrm: Optional[bool] = None
    ongoing_count: Optional[int] = None
    ucs_count: Optional[int] = None

    intake_variant: Optional[str] = None
    created_by: Optional[str] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None

    contacts: int = 0
    last_contact: Optional[datetime] = None
    date_created: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_serializer("last_contact", "created_at", "updated_at", when_used="json-unless-none")
    def as_utc(self, v: datetime) -> str:
        return utc_iso(v)

class ClientList(BaseModel):
    items: List[ClientOut]
    total: int
    search: str = ""

class ClientSummary(BaseModel):
    client_id: str
    stored_contacts: int
    stored_last_contact: Optional[datetime] = None
    derived_contacts: int
    derived_last_contact: Optional[datetime] = None
    consistent: bool

    @field_serializer("stored_last_contact", "derived_last_contact", when_used="json-unless-none")
    def as_utc(self, v: datetime) -> str:
        return utc_iso(v)

class ReconcileResult(BaseModel):
    checked: int
    fixed: int


# ---------- IN MODELS ----------
class ClientIntakeCreate(WorkerIn):
    """Generic intake form. Names are validated by the service, not here."""
    first_name: Optional[str] = None
    middle: Optional[str] = None
    last_name: Optional[str] = None
    aka: Optional[str] = None
    gender: Optional[str] = None
    ethnicity: Optional[str] = None
    age: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    hair: Optional[str] = None
    eyes: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None

    # backdating; read as UTC like every other timestamp
    encounter_date: Optional[date] = Field(default=None, description="UTC day of the encounter")
    encounter_time: Optional[time] = Field(default=None, description="UTC time of day, default 00:00")

    # browser geolocation result: coordinates, or the error it reported
    location: Optional[LocationIn] = None
    location_error: Optional[str] = None

    class Config:
        extra = "ignore"
        coerce_numbers_to_str = True  # "age": 42 from a number input

class SDRMIntakeCreate(ClientIntakeCreate):
    race: Optional[str] = None
    sexual_orientation: Optional[str] = None
    dependents_under_18: int = 0
    veteran_status: bool = False
    disabled: bool = False
    disabled_details: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    date_first_contact: Optional[date] = None
    date_last_contact: Optional[date] = None
    location_initial_contact: Optional[str] = None
    city_prior_to_vista: Optional[str] = None
    length_in_vista: Optional[str] = None
    living_situation: Optional[str] = None
    housing_barrier: Optional[str] = None
    exit_destination: Optional[str] = None
    shelter_destination: Optional[str] = None
    service_referrals: List[str] = Field(default_factory=list)
    referred_from: Optional[str] = None
    new_to_sdrm: bool = True
    ongoing_count: int = 0
    ucs_count: int = 1

class CounterUpdate(BaseModel):
    previous_contacts: int = Field(ge=0)
