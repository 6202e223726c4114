# outreach/models/client.py
from datetime import datetime
import uuid

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Float, Integer, String, Text

from outreach.models.base import Base

def _uuid() -> str:
    return str(uuid.uuid4())

def _now() -> datetime:
    return datetime.utcnow()

class Client(Base):
    __tablename__ = "clients"

    id = Column(String, primary_key=True, default=_uuid)

    # identity
    first_name = Column(String, nullable=False)
    middle = Column(String, nullable=True)
    last_name = Column(String, nullable=False)
    aka = Column(String, nullable=True)

    # description (generic intake)
    gender = Column(String, nullable=True)
    ethnicity = Column(String, nullable=True)
    age = Column(String, nullable=True)
    height = Column(String, nullable=True)
    weight = Column(String, nullable=True)
    hair = Column(String, nullable=True)
    eyes = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # SDRM intake superset
    race = Column(String, nullable=True)
    age_range = Column(String, nullable=True)
    sexual_orientation = Column(String, nullable=True)
    dependents_under_18 = Column(Integer, nullable=True)
    veteran_status = Column(Boolean, nullable=True)
    disabled = Column(Boolean, nullable=True)
    disabled_details = Column(Text, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    date_first_contact = Column(Date, nullable=True)
    date_last_contact = Column(Date, nullable=True)
    location_initial_contact = Column(String, nullable=True)
    city_prior_to_vista = Column(String, nullable=True)
    length_in_vista = Column(String, nullable=True)
    living_situation = Column(String, nullable=True)
    housing_barrier = Column(String, nullable=True)
    exit_destination = Column(String, nullable=True)
    shelter_destination = Column(String, nullable=True)
    service_referrals = Column(JSON, nullable=True)
    referred_from = Column(String, nullable=True)
    new_to_sdrm = Column(Boolean, nullable=True)
    ongoing_count = Column(Integer, nullable=True)
    ucs_count = Column(Integer, nullable=True)

    intake_variant = Column(String, nullable=True)  # 'generic' | 'sdrm'
    created_by = Column(String, nullable=True)
    location_lat = Column(Float, nullable=True)
    location_lng = Column(Float, nullable=True)

    # summary counters, derived from the interactions table
    contacts = Column(Integer, nullable=False, default=0)
    last_contact = Column(DateTime, nullable=True)

    date_created = Column(Date, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False, index=True)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=True)
