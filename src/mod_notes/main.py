"""
mod-notes Backend Application

FastAPI application entrypoint with async lifespan management.
Handles startup checks (database), request logging, rate limiting,
error mapping and graceful shutdown.

Start locally:
    uvicorn mod_notes.main:app --host 0.0.0.0 --port 8000 --reload
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mod_notes.api.v1.notes import router as notes_router
from mod_notes.core import database
from mod_notes.core.config import settings
from mod_notes.core.exceptions import NotesError
from mod_notes.core.logging import setup_logging
from mod_notes.core.rate_limit import enforce_rate_limit

# Initialize logging before any log statements
setup_logging()
logger = logging.getLogger(__name__)

_started_at = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
        - Validates database connectivity (required, blocks startup on failure)

    Shutdown:
        - Disposes the connection pool
    """
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}...")
    logger.info(f"Log Level: {settings.LOG_LEVEL}")

    if not await database.wait_for_db():
        logger.critical("Could not connect to Postgres. Shutting down.")
        raise RuntimeError("Database connection failed")

    yield  # Application runs here

    logger.info(f"Shutting down {settings.PROJECT_NAME}...")
    await database.dispose_engine()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Notes management with full-text and vector search.",
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# /health is not rate limited
app.include_router(
    notes_router,
    prefix=f"{settings.API_PREFIX}/notes",
    tags=["Notes"],
    dependencies=[Depends(enforce_rate_limit)],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every incoming request before it is handled."""
    client = request.client.host if request.client else "unknown"
    logger.info(
        f"Incoming request: {request.method} {request.url.path} "
        f"ip={client} user_agent={request.headers.get('user-agent', '-')}"
    )
    return await call_next(request)


@app.exception_handler(NotesError)
async def notes_error_handler(request: Request, exc: NotesError) -> JSONResponse:
    """Render service errors (validation 400, store failure 500)."""
    http_exc = exc.to_http_exception()
    if http_exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(
        status_code=http_exc.status_code,
        content={"detail": http_exc.detail},
    )


@app.get("/health")
async def health_check():
    """
    Health check endpoint for load balancers and orchestrators.

    Probes the database live; the endpoint itself always answers 200 so
    orchestrators can tell "process up, database down" apart.
    """
    db_ok = await database.ping_database()
    return {
        "status": "ok",
        "service": "mod-notes",
        "version": settings.VERSION,
        "environment": os.getenv("ENVIRONMENT", "unknown"),
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime": round(time.monotonic() - _started_at, 3),
        "database": {
            "status": "connected" if db_ok else "disconnected",
            "name": settings.POSTGRES_DB,
        },
    }
