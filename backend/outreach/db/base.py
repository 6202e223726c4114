from sqlalchemy.engine import Engine
from outreach.models.base import Base


def _import_models() -> None:
    """Import all models so their metadata is registered on Base."""
    import outreach.models.client        # noqa: F401
    import outreach.models.interaction   # noqa: F401


def create_all(engine: Engine) -> None:
    """Create all tables for the registered models (SYNC)."""
    _import_models()
    Base.metadata.create_all(bind=engine)
