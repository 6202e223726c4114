# outreach/crud/clients.py
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import case, func, or_, select, update
from sqlalchemy.orm import Session

from outreach.core.errors import ClientNotFound, StaleCounterError
from outreach.models.client import Client
from outreach.models.interaction import Interaction

def _now() -> datetime:
    return datetime.utcnow()

# columns an intake may write; anything else in the payload is dropped
WRITABLE = {c.name for c in Client.__table__.columns} - {"id", "updated_at"}

def clean_text(s: Optional[str]) -> Optional[str]:
    if s is None:
        return None
    res = str(s).strip()
    return res or None

def insert_client(db: Session, values: Dict[str, Any]) -> Client:
    obj = Client(**{k: v for k, v in values.items() if k in WRITABLE})
    db.add(obj)
    db.flush()
    return obj

def get_client(db: Session, client_id: str) -> Client:
    obj = db.get(Client, client_id)
    if obj is None:
        raise ClientNotFound(client_id)
    return obj

def list_clients(db: Session) -> List[Client]:
    """All clients, newest first."""
    return list(db.execute(select(Client).order_by(Client.created_at.desc())).scalars().all())

def list_client_ids(db: Session) -> List[str]:
    return [r[0] for r in db.execute(select(Client.id)).all()]

def increment_counters(db: Session, client_id: str, contact_at: datetime) -> None:
    """
    One more contact, done in SQL so concurrent writers cannot lose updates.
    last_contact only moves forward: a backdated interaction older than the
    current value leaves it alone.
    """
    stmt = (
        update(Client)
        .where(Client.id == client_id)
        .values(
            contacts=func.coalesce(Client.contacts, 0) + 1,
            last_contact=case(
                (or_(Client.last_contact.is_(None), Client.last_contact < contact_at), contact_at),
                else_=Client.last_contact,
            ),
            updated_at=_now(),
        )
        .execution_options(synchronize_session=False)
    )
    res = db.execute(stmt)
    if res.rowcount == 0:
        raise ClientNotFound(client_id)

def update_counters(
    db: Session, client_id: str, *, previous_contacts: int, contact_at: Optional[datetime] = None
) -> None:
    """
    contacts = previous + 1, guarded by the previous value. Zero matching rows
    means someone else bumped the counter first.
    """
    stmt = (
        update(Client)
        .where(Client.id == client_id, Client.contacts == previous_contacts)
        .values(
            contacts=previous_contacts + 1,
            last_contact=contact_at or _now(),
            updated_at=_now(),
        )
        .execution_options(synchronize_session=False)
    )
    res = db.execute(stmt)
    if res.rowcount == 0:
        if db.get(Client, client_id) is None:
            raise ClientNotFound(client_id)
        raise StaleCounterError(client_id, previous_contacts)

def rebuild_counters(db: Session, client_ids: Optional[Iterable[str]] = None) -> int:
    """
    Recompute contacts/last_contact from the interactions table in a single
    UPDATE, touching only rows that drifted. Returns the number of rows fixed.
    Count and max are evaluated inside the statement, so an interaction
    committed just before it is always included.
    """
    count_sq = (
        select(func.count(Interaction.id))
        .where(Interaction.client_id == Client.id)
        .scalar_subquery()
    )
    latest_sq = (
        select(func.max(Interaction.interaction_date))
        .where(Interaction.client_id == Client.id)
        .scalar_subquery()
    )
    stmt = (
        update(Client)
        .where(
            or_(
                func.coalesce(Client.contacts, -1) != count_sq,
                Client.last_contact.is_distinct_from(latest_sq),
            )
        )
        .values(contacts=count_sq, last_contact=latest_sq, updated_at=_now())
        .execution_options(synchronize_session=False)
    )
    if client_ids is not None:
        ids = list(client_ids)
        if not ids:
            return 0
        stmt = stmt.where(Client.id.in_(ids))
    return db.execute(stmt).rowcount
