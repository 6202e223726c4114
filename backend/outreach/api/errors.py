# outreach/api/errors.py
from fastapi import HTTPException, status

from outreach.core.errors import (
    ClientNotFound,
    OutreachError,
    StaleCounterError,
    StoreError,
    ValidationError,
)


def to_http(exc: OutreachError) -> HTTPException:
    """Service error -> HTTP error. The message goes to the operator unchanged."""
    if isinstance(exc, ValidationError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, ClientNotFound):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, StaleCounterError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, StoreError):
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))
