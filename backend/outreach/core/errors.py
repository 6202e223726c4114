# backend/outreach/core/errors.py
"""Error types raised by the services and translated to HTTP errors by the routers."""


class OutreachError(Exception):
    """Base class for every error the services raise on purpose."""


class ValidationError(OutreachError):
    """Required input missing or outside the accepted vocabulary. Blocks the write."""


class ClientNotFound(OutreachError):
    def __init__(self, client_id: str):
        super().__init__(f"Client not found: {client_id}")
        self.client_id = client_id


class StoreError(OutreachError):
    """Any failure coming back from the database. The message is shown to the operator as-is."""


class StaleCounterError(StoreError):
    """The client's contact counter changed since the caller last read it."""

    def __init__(self, client_id: str, expected: int):
        super().__init__(
            f"Contact count for client {client_id} is no longer {expected}; reload and try again"
        )
        self.client_id = client_id
        self.expected = expected


class LocationUnavailable(OutreachError):
    """Geolocation denied, unsupported or timed out. Never blocks a record write."""
