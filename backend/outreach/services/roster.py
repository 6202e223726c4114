# outreach/services/roster.py
from typing import Any, Iterable, List, Mapping


def _field(obj: Any, name: str) -> str:
    if isinstance(obj, Mapping):
        v = obj.get(name)
    else:
        v = getattr(obj, name, None)
    return "" if v is None else str(v)


def matches(client: Any, query: str) -> bool:
    """Plain case-insensitive substring match on "first last", aka and description."""
    q = query.lower()
    full_name = f"{_field(client, 'first_name')} {_field(client, 'last_name')}"
    return (
        q in full_name.lower()
        or q in _field(client, "aka").lower()
        or q in _field(client, "description").lower()
    )


def filter_clients(clients: Iterable[Any], query: str) -> List[Any]:
    """Keeps input order. Blank query returns everything."""
    clients = list(clients)
    if not query or not query.strip():
        return clients
    return [c for c in clients if matches(c, query)]
