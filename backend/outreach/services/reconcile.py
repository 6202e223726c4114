# outreach/services/reconcile.py
"""
Keeps the denormalized client counters (contacts, last_contact) in line with
the interaction log they summarize, and imports interaction rows exported
from the old store.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from sqlalchemy.orm import Session

from outreach.crud.clients import get_client, list_client_ids, rebuild_counters
from outreach.crud.interactions import aggregate_for_client, existing_legacy_ids, log_interaction
from outreach.db.guard import store_call
from outreach.models.client import Client
from outreach.services.legacy import legacy_key, normalize_interaction_row

logger = logging.getLogger(__name__)


def client_summary(db: Session, client_id: str) -> Dict[str, Any]:
    """Stored counters next to the ones derived from the interaction log."""
    with store_call(db, "load client summary"):
        client = get_client(db, client_id)
        derived_contacts, derived_last = aggregate_for_client(db, client_id)
    stored_contacts = client.contacts or 0
    return {
        "client_id": client.id,
        "stored_contacts": stored_contacts,
        "stored_last_contact": client.last_contact,
        "derived_contacts": derived_contacts,
        "derived_last_contact": derived_last,
        "consistent": stored_contacts == derived_contacts and client.last_contact == derived_last,
    }


def reconcile_client(db: Session, client_id: str) -> Dict[str, Any]:
    """Rebuild one client's counters from its interactions. Returns the fresh summary."""
    with store_call(db, "reconcile client"):
        get_client(db, client_id)
        fixed = rebuild_counters(db, [client_id])
        db.commit()
    if fixed:
        logger.info("[reconcile] client=%s counters rebuilt", client_id)
    return client_summary(db, client_id)


def reconcile_all(db: Session, client_ids: Optional[Iterable[str]] = None) -> Dict[str, int]:
    """Sweep clients (all of them by default) and fix drifted counters."""
    with store_call(db, "reconcile clients"):
        ids = list(client_ids) if client_ids is not None else list_client_ids(db)
        fixed = rebuild_counters(db, ids)
        db.commit()

    if fixed:
        logger.info("[reconcile] checked=%s fixed=%s", len(ids), fixed)
    return {"checked": len(ids), "fixed": fixed}


def import_legacy_interactions(db: Session, rows: List[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    One-time migration of old interaction rows into the canonical table.
    Rows without a known client or any timestamp are skipped and reported,
    as are rows whose old id was already imported, so a rerun adds nothing.
    The counters of every touched client are rebuilt afterwards.
    """
    skipped: List[Dict[str, Any]] = []
    touched: Set[str] = set()

    with store_call(db, "import interactions"):
        seen = existing_legacy_ids(db, (legacy_key(r) for r in rows))
        for idx, raw in enumerate(rows):
            try:
                row = normalize_interaction_row(raw)
            except (ValueError, OverflowError) as exc:
                skipped.append({"index": idx, "reason": f"bad timestamp: {exc}"})
                continue
            cid = row["client_id"]
            if not cid or db.get(Client, cid) is None:
                skipped.append({"index": idx, "reason": f"unknown client: {cid}"})
                continue
            if row["interaction_date"] is None:
                skipped.append({"index": idx, "reason": "no interaction_date or created_at"})
                continue
            legacy_id = row["legacy_id"]
            if legacy_id is not None:
                if legacy_id in seen:
                    skipped.append({"index": idx, "reason": f"already imported: {legacy_id}"})
                    continue
                seen.add(legacy_id)
            log_interaction(
                db,
                client_id=cid,
                type_=row["interaction_type"],
                interaction_date=row["interaction_date"],
                created_at=row["created_at"],
                worker_id=row["worker_id"],
                worker_name=row["worker_name"],
                notes=row["notes"],
                latitude=row["latitude"],
                longitude=row["longitude"],
                accuracy=row["accuracy"],
                legacy_id=legacy_id,
            )
            touched.add(cid)
        db.commit()

    logger.info("[import] imported=%s skipped=%s", len(rows) - len(skipped), len(skipped))
    result = reconcile_all(db, sorted(touched)) if touched else {"checked": 0, "fixed": 0}
    return {
        "imported": len(rows) - len(skipped),
        "skipped": skipped,
        "reconciled": result["fixed"],
    }
