"""
SalesRoles Backend API
======================

FastAPI service behind the incentive console.

- Roles: CRUD, default-role bookkeeping, "at least one role" invariant.
- Products: catalogue CRUD and role ↔ product assignments.
- Assistant: AI-generated role descriptions, recommendations, permissions.
- Health: database connectivity and process metrics.

Run with:
    uvicorn backend.main:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend.routes.assistant import router as assistant_router
from backend.routes.products import router as products_router
from backend.routes.roles import router as roles_router
from core.config import API_PREFIX, BACKEND_VERSION, SEED_ON_STARTUP
from core.health import system_health
from core.logger import get_logger
from core.metadata import get_metadata
from database import queries
from database.db_setup import init_db
from database.seed import seed_database

logger = get_logger(__name__)


# --------------------------------------------------------------------------- #
# Lifespan: schema + optional seed
# --------------------------------------------------------------------------- #

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(queries.current_engine())
    if SEED_ON_STARTUP:
        inserted = seed_database()
        logger.info(f"[Backend] Seed result: {inserted}")
    yield


# --------------------------------------------------------------------------- #
# FastAPI App
# --------------------------------------------------------------------------- #

app = FastAPI(
    title="SalesRoles Backend API",
    version=BACKEND_VERSION,
    description=(
        "Backend for sales team roles and incentive plans.\n"
        "- Role and product CRUD with role-product assignments.\n"
        "- AI-assisted role descriptions, recommendations and permissions."
    ),
    lifespan=lifespan,
)

app.include_router(roles_router, prefix=API_PREFIX)
app.include_router(products_router, prefix=API_PREFIX)
app.include_router(assistant_router, prefix=API_PREFIX)


# --------------------------------------------------------------------------- #
# Validation errors: 400 with one entry per offending field
# --------------------------------------------------------------------------- #

def _field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query")]
        errors.append({"field": ".".join(loc), "message": err.get("msg", ""), "type": err.get("type", "")})
    return errors


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": "Validation error", "errors": _field_errors(exc)})


# --------------------------------------------------------------------------- #
# Core Routes
# --------------------------------------------------------------------------- #

@app.get("/")
async def root():
    """
    Basic liveness probe.
    """
    return {
        "status": "ok",
        "message": "SalesRoles Backend is live.",
        "version": app.version,
        "metadata": get_metadata(),
    }


@app.get("/health")
def health():
    """
    System health endpoint; see core.health.system_health.
    """
    return system_health()
