# src/ADMS/main.py
from __future__ import annotations

from collections import defaultdict
from contextlib import asynccontextmanager

import sqlalchemy as sa
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

from ADMS.api.routers.departments import router as departments_router
from ADMS.api.routers.health import router as health_router
from ADMS.app_logger import get_logger, setup_logging
from ADMS.core.config import Settings, settings as default_settings
from ADMS.db.session import Database

log = get_logger("main")


def validation_errors_by_field(exc: RequestValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by dotted field path, dropping the "body" prefix."""
    fields: dict[str, list[str]] = defaultdict(list)
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ())]
        if len(loc) > 1 and loc[0] in ("body", "path", "query"):
            loc = loc[1:]
        fields[".".join(loc) or "body"].append(err.get("msg", "Invalid value"))
    return dict(fields)


def create_app(database: Database | None = None, app_settings: Settings | None = None) -> FastAPI:
    """
    Build the API.

    When ``database`` is given the caller owns its lifecycle (tests, embedding).
    Otherwise the lifespan opens one from settings and disposes it on shutdown.
    """
    cfg = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ---------------- STARTUP ----------------
        owned = getattr(app.state, "database", None) is None
        if owned:
            app.state.database = Database(cfg.DATABASE_URL, echo=cfg.DB_ECHO, nullpool=cfg.TESTING)

        if not cfg.TESTING:
            try:
                async with app.state.database.session() as session:
                    await session.execute(sa.text("SELECT 1"))
            except SQLAlchemyError:
                log.exception("[startup] database ping failed")
        log.info("[startup] %s %s ready", cfg.APP_NAME, cfg.APP_VERSION)

        yield

        # ---------------- SHUTDOWN ----------------
        if owned:
            await app.state.database.dispose()
            app.state.database = None
        log.info("[shutdown] complete")

    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION, lifespan=lifespan)
    app.state.database = database

    if cfg.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(o).rstrip("/") for o in cfg.cors_origins],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Malformed input is the caller's fault: 400 with per-field messages."""
        fields = validation_errors_by_field(exc)
        log.debug("validation failed on %s %s: %s", request.method, request.url.path, fields)
        return JSONResponse(
            {"error": "Validation failed", "fields": fields},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        """Integrity and connection failures: log the detail, return nothing of it."""
        log.error("storage failure on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            {"error": "Internal Server Error"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    app.include_router(health_router)
    app.include_router(departments_router)
    return app


def app_factory() -> FastAPI:
    """Entry point for uvicorn/gunicorn (``--factory``)."""
    setup_logging()
    # fresh Settings so environment set by `adms serve` is honoured
    return create_app(app_settings=Settings())
