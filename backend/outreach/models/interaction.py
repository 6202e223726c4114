# outreach/models/interaction.py
from datetime import datetime
import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text

from outreach.models.base import Base

def _uuid() -> str:
    return str(uuid.uuid4())

def _now() -> datetime:
    return datetime.utcnow()

class Interaction(Base):
    __tablename__ = "interactions"

    id = Column(String, primary_key=True, default=_uuid)
    client_id = Column(String, ForeignKey("clients.id"), index=True, nullable=False)
    # id of the row in the old store, set only by the import
    legacy_id = Column(String, nullable=True, unique=True, index=True)

    worker_id = Column(String, nullable=True)
    worker_name = Column(String, nullable=True)
    interaction_type = Column(String, nullable=False)  # e.g., 'Initial Intake', 'service'
    notes = Column(Text, nullable=True)

    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    accuracy = Column(Float, nullable=True)

    # when the contact happened; may be backdated, unlike created_at
    interaction_date = Column(DateTime, nullable=False, index=True)

    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=True)
