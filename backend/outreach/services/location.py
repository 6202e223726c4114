# outreach/services/location.py
import logging
from typing import Optional, Tuple

from outreach.core.errors import LocationUnavailable
from outreach.schemas.clients import LocationIn

logger = logging.getLogger(__name__)

NO_FIX = "Location not available"


def resolve_location(location: Optional[LocationIn], error: Optional[str] = None) -> LocationIn:
    """
    Coordinates captured by the browser, or LocationUnavailable carrying the
    reason the browser gave (denied, timed out, unsupported).
    """
    if location is not None:
        return location
    raise LocationUnavailable((error or "").strip() or NO_FIX)


def best_effort_location(
    location: Optional[LocationIn], error: Optional[str] = None, *, context: str = "location"
) -> Tuple[Optional[LocationIn], Optional[str]]:
    """(location, None) when captured, else (None, warning). Never raises."""
    try:
        return resolve_location(location, error), None
    except LocationUnavailable as exc:
        logger.warning("[%s] continuing without location: %s", context, exc)
        return None, str(exc)
