from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from .api import (
    cascade_router,
    history_router,
    items_router,
    menu_router,
    settings_router,
    stylesheet_router,
    transfer_router,
)
from .config import get_settings
from .db.database import get_database
from .db.migrations import init_db
from .db.utils import transaction_scope
from .log import setup_logging
from .services.activation import activate
from .services.option_store import SqlOptionStore

logger = logging.getLogger(__name__)


def _resolve_cors_options() -> tuple[list[str], bool]:
    settings = get_settings()
    allow_origins = settings.cors_allow_origins or ["*"]
    allow_credentials = settings.cors_allow_credentials

    if "*" in allow_origins and allow_credentials:
        logger.warning(
            "CORS_ALLOW_CREDENTIALS is true while CORS_ALLOW_ORIGINS contains '*'; forcing credentials=false"
        )
        allow_credentials = False

    return allow_origins, allow_credentials


@asynccontextmanager
async def _lifespan(_: FastAPI):
    database = get_database()
    init_db(database)
    with transaction_scope(database) as session:
        activate(SqlOptionStore(session), home_url=get_settings().site_url)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_dir, settings.log_level)

    app = FastAPI(title="Floating Side Menu API", lifespan=_lifespan)

    allow_origins, allow_credentials = _resolve_cors_options()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(menu_router)
    app.include_router(history_router)
    app.include_router(stylesheet_router)
    app.include_router(items_router)
    app.include_router(cascade_router)
    app.include_router(transfer_router)
    app.include_router(settings_router)

    @app.get("/health")
    def health() -> dict:
        checks: dict[str, str] = {}
        overall = "ok"
        try:
            with get_database().session() as session:
                session.execute(text("SELECT 1"))
            checks["database"] = "ok"
        except Exception as exc:
            checks["database"] = f"error: {exc}"
            overall = "degraded"
        return {"status": overall, "checks": checks}

    return app


app = create_app()

__all__ = ["create_app", "app"]
