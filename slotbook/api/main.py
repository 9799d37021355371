"""slotbook FastAPI application: entry point.

Start with:
    uvicorn slotbook.api.main:app --reload --host 0.0.0.0 --port 8000

Public booking endpoints live under /api/v1/booking; everything under
/api/v1/admin requires the X-Api-Key header once ADMIN_API_KEY is set.
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from slotbook.config import load_booking_config
from slotbook.core.exceptions import ProjectError
from slotbook.core.logger import configure as configure_logging
from slotbook.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    ensure_database_exists,
    init_db,
)
from slotbook.services.notification_service import WebhookNotifier

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ──────────────────────────────────────────────────
    configure_logging()

    booking_config = load_booking_config()
    await ensure_database_exists()
    engine = build_engine()
    app.state.session_factory = build_session_factory(engine)
    await init_db()

    app.state.booking_config = booking_config
    app.state.notifier = WebhookNotifier(booking_config)
    logger.info(
        "API: ready (blocked_window_mode=%s, notifications=%s)",
        booking_config.blocked_window_mode,
        "on" if booking_config.notifications_enabled else "off",
    )

    yield

    # ── Shutdown ─────────────────────────────────────────────────
    await close_engine()
    logger.info("API: engine disposed")


async def project_error_handler(request: Request, exc: ProjectError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("API: %s %s failed: %r", request.method, request.url.path, exc)
    else:
        logger.info("API: %s %s → %d %s", request.method, request.url.path, exc.http_status, exc.code)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


app = FastAPI(
    title="slotbook API",
    version="1.0.0",
    description="Appointment booking: services, working hours, open dates, slots and bookings.",
    lifespan=lifespan,
)

# ── Routers ───────────────────────────────────────────────────────
from slotbook.api.routers import appointments, booking, dashboard, exceptions, rules, services  # noqa: E402

# Rate limiter for booking submissions; limit from BOOKING_RATE_LIMIT (default 10/minute)
app.state.limiter = booking.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(ProjectError, project_error_handler)

# CORS: allow the booking front end and any configured origin
_allowed_origins = os.environ.get(
    "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
).split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Optional API key authentication ──────────────────────────────
# Set ADMIN_API_KEY env var to protect all /api/v1/admin/* endpoints.
# Requests must then include the header:  X-Api-Key: <value>
# If ADMIN_API_KEY is not set the check is skipped (dev/open mode).
_ADMIN_API_KEY = os.environ.get("ADMIN_API_KEY", "").strip() or None


@app.middleware("http")
async def api_key_middleware(request: Request, call_next):
    if _ADMIN_API_KEY and request.url.path.startswith("/api/v1/admin"):
        if request.headers.get("X-Api-Key") != _ADMIN_API_KEY:
            return JSONResponse(
                status_code=401,
                content={"detail": "Unauthorized, set X-Api-Key header", "code": "UNAUTHORIZED"},
            )
    return await call_next(request)


app.include_router(booking.router, prefix="/api/v1")
app.include_router(services.router, prefix="/api/v1")
app.include_router(rules.router, prefix="/api/v1")
app.include_router(exceptions.router, prefix="/api/v1")
app.include_router(appointments.router, prefix="/api/v1")
app.include_router(dashboard.router, prefix="/api/v1")


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
