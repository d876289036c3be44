from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Runs before any service or database connection is initialised.
    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.

    Rules:
    - A PostgreSQL database URL must be configured.
    - Numeric query limits must be positive integers when set.
    """

    from db.config import find_database_url, load_env_files

    load_env_files()

    errors: list[str] = []

    # --- Database URL ---------------------------------------------------
    database_url = find_database_url()
    if database_url is None:
        errors.append(
            "No database URL configured. Set DATABASE_URL, LOCAL_DATABASE_URL "
            "or CLOUD_DATABASE_URL."
        )
    elif not database_url.startswith("postgresql"):
        errors.append("Database URL must point at PostgreSQL.")

    # --- Query limits ---------------------------------------------------
    for name in (
        "RECORDS_QUERY_LIMIT",
        "TRANSFORM_RECORD_LIMIT",
        "TIMELINE_DEFAULT_LIMIT",
        "TIMELINE_MAX_LIMIT",
    ):
        raw = os.getenv(name)
        if raw is None:
            continue
        try:
            valid = int(raw) > 0
        except ValueError:
            valid = False
        if not valid:
            errors.append(f"{name}='{raw}' is not a positive integer.")

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


def _check_schema() -> None:
    """
    Compare Base.metadata table names against the live DB schema.

    Every table registered on Base.metadata must exist in the database.
    Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401 registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        log = logging.getLogger(__name__)
        log.critical(
            "Schema mismatch: %d table(s) defined in ORM metadata are absent from "
            "the database: %s. Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity and schema on boot; release the pool on exit."""
    _check_db()
    logging.getLogger(__name__).info("Database connectivity confirmed")
    _check_schema()
    logging.getLogger(__name__).info("Database schema validated")
    try:
        yield
    finally:
        from db.session import dispose_engine

        dispose_engine()
        logging.getLogger(__name__).info("Database connections closed")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Clinical Records API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.errors import register_error_handlers
    from app.api.routers import (
        analytics_router,
        imports_router,
        records_router,
        timelines_router,
        transforms_router,
    )

    register_error_handlers(application)
    application.include_router(imports_router)
    application.include_router(records_router)
    application.include_router(transforms_router)
    application.include_router(analytics_router)
    application.include_router(timelines_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
