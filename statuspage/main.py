from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from statuspage.config import Settings, settings as default_settings
from statuspage.core.bootstrap import seed_admin_user, seed_default_settings
from statuspage.core.errors import register_error_handlers
from statuspage.db import build_engine, build_session_factory
from statuspage.routers import (
    auth,
    components,
    database,
    incidents,
    maintenance,
    services,
    status,
)

# Routers con nombre que colisiona (settings) -> import explícito de su "router"
from statuspage.routers.settings import router as settings_router

logger = logging.getLogger("statuspage")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _run_startup_seeds(app: FastAPI, cfg: Settings) -> None:
    db = app.state.session_factory()
    try:
        seed_default_settings(db)
        if cfg.INITIAL_ADMIN_EMAIL and cfg.INITIAL_ADMIN_PASSWORD:
            seed_admin_user(
                db=db,
                email=cfg.INITIAL_ADMIN_EMAIL,
                password=cfg.INITIAL_ADMIN_PASSWORD,
                name=cfg.INITIAL_ADMIN_NAME,
            )
    finally:
        db.close()


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    `engine` se inyecta en tests (SQLite en memoria). Si no viene, la app crea
    el suyo en el lifespan y lo cierra al apagar.
    """
    cfg = settings or default_settings
    _configure_logging(cfg.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_engine = engine is None
        eng = engine if engine is not None else build_engine(cfg.DATABASE_URL)
        app.state.engine = eng
        app.state.session_factory = build_session_factory(eng)

        _run_startup_seeds(app, cfg)
        logger.info("Status page API lista (db=%s)", eng.dialect.name)
        try:
            yield
        finally:
            if owns_engine:
                eng.dispose()

    app = FastAPI(
        title="Status Page API",
        version="0.1.0",
        description="Backend del status page: servicios, incidentes y mantenimientos.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    @app.get("/health", tags=["system"])
    def health_check():
        return {"status": "ok", "service": "statuspage-api", "version": app.version}

    # Routers
    app.include_router(auth.router)
    app.include_router(services.router)
    app.include_router(components.router)
    app.include_router(incidents.router)
    app.include_router(maintenance.router)
    app.include_router(settings_router)
    app.include_router(database.router)
    app.include_router(status.router)

    return app


app = create_app()
