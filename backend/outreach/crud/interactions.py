# outreach/crud/interactions.py
from datetime import datetime
from typing import Iterable, List, Optional, Set, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from outreach.models.interaction import Interaction

def log_interaction(
    db: Session,
    *,
    client_id: str,
    type_: str,
    interaction_date: datetime,
    worker_id: Optional[str] = None,
    worker_name: Optional[str] = None,
    notes: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    accuracy: Optional[float] = None,
    created_at: Optional[datetime] = None,
    legacy_id: Optional[str] = None,
) -> Interaction:
    evt = Interaction(
        client_id=client_id,
        worker_id=worker_id,
        worker_name=worker_name,
        interaction_type=type_,
        notes=notes,
        latitude=latitude,
        longitude=longitude,
        accuracy=accuracy,
        interaction_date=interaction_date,
        legacy_id=legacy_id,
    )
    if created_at is not None:
        evt.created_at = created_at
    db.add(evt)
    db.flush()
    return evt

def list_for_client(db: Session, client_id: str, limit: Optional[int] = None) -> List[Interaction]:
    """Newest event first (by interaction_date, not row creation)."""
    q = (
        select(Interaction)
        .where(Interaction.client_id == client_id)
        .order_by(Interaction.interaction_date.desc())
    )
    if limit is not None:
        q = q.limit(int(limit))
    return list(db.execute(q).scalars().all())

def aggregate_for_client(db: Session, client_id: str) -> Tuple[int, Optional[datetime]]:
    count, latest = db.execute(
        select(func.count(Interaction.id), func.max(Interaction.interaction_date))
        .where(Interaction.client_id == client_id)
    ).one()
    return int(count or 0), latest

def existing_legacy_ids(db: Session, ids: Iterable[str]) -> Set[str]:
    """Which of these old-store ids were already imported."""
    ids = [i for i in set(ids) if i]
    if not ids:
        return set()
    rows = db.execute(select(Interaction.legacy_id).where(Interaction.legacy_id.in_(ids))).all()
    return {r[0] for r in rows}
