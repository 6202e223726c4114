# outreach/services/legacy.py
"""
Read adapter for interaction rows written before the canonical schema.

Three shapes exist in old exports:

    intake form     worker_name / interaction_type / location_lat / location_lng
    logging dialog  outreach_user / log_type / latitude / longitude (0, 0 when no fix)
    SDRM intake     worker_name / interaction_type / location {latitude, longitude, accuracy}

`normalize_interaction_row` folds all of them into the canonical column names.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from dateutil import parser as dateparse

DEFAULT_TYPE = "Contact"
DEFAULT_WORKER = "Unknown Worker"


def _first(row: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        v = row.get(k)
        if v not in (None, ""):
            return v
    return None


def coalesce_type(row: Mapping[str, Any]) -> Optional[str]:
    return _first(row, "log_type", "interaction_type")


def coalesce_worker(row: Mapping[str, Any]) -> Optional[str]:
    return _first(row, "outreach_user", "worker_name")


def display_type(row: Mapping[str, Any]) -> str:
    return coalesce_type(row) or DEFAULT_TYPE


def display_worker(row: Mapping[str, Any]) -> str:
    return coalesce_worker(row) or DEFAULT_WORKER


def _as_float(v: Any) -> Optional[float]:
    if v in (None, ""):
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None


def _coord(row: Mapping[str, Any], nested: Mapping[str, Any], *keys: str) -> Optional[float]:
    v = _first(row, *keys)
    if v is None:
        # nested object uses the canonical key
        v = nested.get(keys[0])
    return _as_float(v)


def _coords(row: Mapping[str, Any]) -> tuple[Optional[float], Optional[float], Optional[float]]:
    # the logging dialog also wrote location: '' next to latitude/longitude
    nested = row.get("location") if isinstance(row.get("location"), Mapping) else {}
    lat = _coord(row, nested, "latitude", "location_lat")
    lng = _coord(row, nested, "longitude", "location_lng")
    acc = _coord(row, nested, "accuracy")
    # the logging dialog wrote 0/0 when no fix was available
    if lat == 0 and lng == 0:
        return None, None, None
    return lat, lng, acc


def legacy_key(row: Mapping[str, Any]) -> Optional[str]:
    """The row's id in the old store, used to skip rows already imported."""
    v = _first(row, "legacy_id", "id")
    return None if v is None else str(v)


def parse_timestamp(v: Any) -> Optional[datetime]:
    """ISO strings or datetimes, returned as naive UTC."""
    if v in (None, ""):
        return None
    dt = v if isinstance(v, datetime) else dateparse.parse(str(v))
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def normalize_interaction_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Canonical column dict for a raw row in any of the known shapes."""
    lat, lng, acc = _coords(row)
    interaction_date = parse_timestamp(row.get("interaction_date")) or parse_timestamp(row.get("created_at"))
    return {
        "client_id": row.get("client_id"),
        "legacy_id": legacy_key(row),
        "worker_id": _first(row, "worker_id"),
        "worker_name": coalesce_worker(row),
        "interaction_type": display_type(row),
        "notes": row.get("notes"),
        "latitude": lat,
        "longitude": lng,
        "accuracy": acc,
        "interaction_date": interaction_date,
        "created_at": parse_timestamp(row.get("created_at")) or interaction_date,
    }
