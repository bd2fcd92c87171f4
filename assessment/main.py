from __future__ import annotations

import logging
import os
from typing import Callable

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from assessment.db.base import get_engine
from assessment.db.migrations_runner import apply_migrations
from assessment.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from assessment.http.request_id import RequestIdMiddleware
from assessment.logging_setup import configure_logging
from assessment.middleware.cors import apply_cors
from assessment.routes import api_router

logger = logging.getLogger(__name__)


def _health_check() -> Callable[[], dict]:
    def check() -> dict:
        try:
            with get_engine().connect() as conn:
                conn.execute(sql_text("SELECT 1"))
            return {"status": "ok", "db": True}
        except SQLAlchemyError as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": str(e)}

    return check


def _auto_apply_migrations() -> None:
    enable_flag = os.getenv("AUTO_APPLY_MIGRATIONS", "1").strip().lower() in {"1", "true", "yes", "on"}
    if not enable_flag:
        logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")
        return
    try:
        applied = apply_migrations(get_engine())
    except SQLAlchemyError:
        logger.error("Failed to apply migrations at startup", exc_info=True)
        raise
    logger.info("startup_migrations applied=%s", applied)


def create_app() -> FastAPI:
    """Build the FastAPI application.

    Migrations run when the app is created (unless AUTO_APPLY_MIGRATIONS is
    off), so an in-memory SQLite database is usable straight away.
    """
    configure_logging()
    app = FastAPI(title="Assessment Scoring Service")

    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    apply_cors(app)
    app.add_middleware(RequestIdMiddleware)

    _auto_apply_migrations()

    app.include_router(api_router, prefix="/api/v1")

    health_check = _health_check()

    @app.get("/health")
    def health():  # pragma: no cover - trivial
        return health_check()

    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
