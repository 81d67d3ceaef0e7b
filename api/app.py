"""
FastAPI application factory for the voters listing API.

Usage:
    python -m api.app                       # Dev server on port 8000
    APP_DB_PATH=/data/voters.sqlite python -m api.app

OpenAPI docs available at http://localhost:8000/docs after starting.

The API is read-only: it answers count + page queries over the ``voters``
table for the dashboard (see dashboard/), which does all further filtering
and aggregation client-side.
"""

import logging
import sqlite3
import time
import uuid
import warnings
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import database
from api.models import ErrorResponse
from api.routes import voters
from utils.config import AppConfig
from utils.database import get_table_count
from utils.logging import configure_logging

# ── Configuration ─────────────────────────────────────────────────────────────
_cfg = AppConfig.from_env()

configure_logging(_cfg.log_format)
_logger = logging.getLogger("voter_status_api")

_SLOW_REQUEST_MS = 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Warn about a missing database on startup; close pooled connections on shutdown."""
    db_path = database.get_db_path()
    if not db_path.exists():
        warnings.warn(f"Database not found at {db_path}.", stacklevel=2)
    yield
    database.close_pool()


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_path: Override the database path (useful for testing).

    Returns:
        Configured FastAPI application instance.
    """
    if db_path is not None:
        database.set_db_path(db_path)

    app = FastAPI(
        title="Voter Status API",
        summary="Read-only listing API over the voter survey table.",
        description=(
            "## Voter Status API\n\n"
            "Paginated listing of voters with survey and voting status, "
            "consumed by the voter status dashboard.\n\n"
            "- `page` is 1-based; `limit` accepts up to 100000 so a client "
            "can pull the whole table in one request.\n"
            "- `search` is a case-insensitive substring match over name, "
            "voter ID, booth, colony, mobile number and voting status."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "voters", "description": "List and retrieve voter rows."},
            {"name": "meta", "description": "Health check."},
        ],
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging middleware ────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request with its duration and attach an X-Request-ID header."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path

        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if _cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "client_ip": client_ip,
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f ip=%s rid=%s",
                request.method, path, response.status_code, duration_ms,
                client_ip, request_id,
            )
        if duration_ms > _SLOW_REQUEST_MS:
            _logger.warning(
                "slow_request method=%s path=%s duration_ms=%.1f",
                request.method, path, duration_ms,
            )
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of HTML traceback."""
        _logger.error("unhandled error path=%s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal server error", detail=str(exc), status_code=500,
            ).model_dump(),
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error="Bad request", detail=str(exc), status_code=400,
            ).model_dump(),
        )

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check")
    def health():
        """Return 200 OK if the API is running and can read the voters table."""
        db_path = database.get_db_path()
        if not db_path.exists():
            return JSONResponse(
                status_code=503,
                content={"status": "no_database", "database": str(db_path)},
            )
        try:
            conn = sqlite3.connect(f"file:{db_path}?mode=ro", uri=True)
            try:
                count = get_table_count(conn)
            finally:
                conn.close()
        except sqlite3.Error as e:
            return JSONResponse(
                status_code=503,
                content={"status": "degraded", "error": str(e)},
            )
        return {"status": "ok", "database": str(db_path), "voters": count}

    # ── Register routers ──────────────────────────────────────────────────────

    app.include_router(voters.router, prefix="/api/v1")

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
