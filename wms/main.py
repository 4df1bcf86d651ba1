from __future__ import annotations

import logging

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from wms import models  # noqa: F401  (registers every table on Base.metadata)
from wms.core.config import settings
from wms.db.session import engine
from wms.models.base import Base
from wms.routes.pricing import router as pricing_router
from wms.routes.reports import router as reports_router
from wms.routes.statements import router as statements_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "wms-billing-api"
VERSION = "1.0.0"

# ============================================================
# DB table creation (DEV ONLY)
# - In production, prefer Alembic migrations.
# - Guarded so a transient DB outage doesn't prevent app startup.
# ============================================================
if settings.RUN_CREATE_ALL:
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("DB tables ensured via create_all (RUN_CREATE_ALL=1).")
    except SQLAlchemyError:
        logger.exception("Base.metadata.create_all failed; continuing startup without it.")

app = FastAPI(
    title="WMS Billing API",
    version=VERSION,
)

# ============================================================
# CORS
# - Include localhost for dev and FRONTEND_URL for production.
# ============================================================
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

if settings.FRONTEND_URL and settings.FRONTEND_URL.strip():
    origins.append(settings.FRONTEND_URL.strip())

# Deduplicate + drop empties
allow_origins = sorted({o for o in origins if o})

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = "/api/v1"


@app.api_route("/", methods=["GET", "HEAD"], status_code=status.HTTP_200_OK)
def root():
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": VERSION,
    }


@app.api_route("/health", methods=["GET", "HEAD"], status_code=status.HTTP_200_OK)
def health_check():
    """Health check endpoint for uptime monitoring."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": VERSION,
            "database": "connected",
        }

    except SQLAlchemyError:
        logger.warning("health check: database unreachable", exc_info=True)
        return {
            "status": "error",
            "service": SERVICE_NAME,
            "database": "disconnected",
        }


# Routers
app.include_router(statements_router, prefix=API_PREFIX)
app.include_router(reports_router, prefix=API_PREFIX)
app.include_router(pricing_router, prefix=API_PREFIX)
