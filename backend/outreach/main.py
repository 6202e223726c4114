import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from outreach.api.routes.clients import router as clients_router
from outreach.api.routes.health import router as health_router
from outreach.api.routes.intake import router as intake_router
from outreach.api.routes.interactions import router as interactions_router

from outreach.core.config import settings
from outreach.core.logging import configure_logging
from outreach.db.base import create_all
from outreach.db.session import engine
from outreach.scheduler import init_scheduler

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    configure_logging(settings)

    app = FastAPI(title=settings.PROJECT_NAME, version="1.0")

    allowed_origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS", "HEAD"],
        allow_headers=["*"],
    )

    app.include_router(health_router, tags=["health"])
    app.include_router(clients_router, prefix="/api")
    app.include_router(intake_router, prefix="/api")
    app.include_router(interactions_router, prefix="/api")

    init_scheduler(app)

    @app.on_event("startup")
    def _startup_db() -> None:
        create_all(engine)
        logger.info("[DB] Using: %s", engine.url.render_as_string(hide_password=True))
        logger.info("[CORS] allow_origins = %s", allowed_origins)

    return app


app = create_app()
