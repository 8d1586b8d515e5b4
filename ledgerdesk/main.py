"""FastAPI entrypoint for the LedgerDesk back-office API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ledgerdesk.api.v1.api import api_router
from ledgerdesk.core.config import settings
from ledgerdesk.core.errors import LedgerDeskError
from ledgerdesk.db import session as db_session
from ledgerdesk.db.base import Base
from ledgerdesk.db.seed import ensure_seed_data

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(LedgerDeskError)
def handle_domain_error(request: Request, exc: LedgerDeskError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path", "header"))
        message = f"Invalid {field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.on_event("startup")
def startup() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    Base.metadata.create_all(bind=db_session.engine)
    with db_session.SessionLocal() as session:
        try:
            ensure_seed_data(session)
        except Exception:
            logger.exception("[BOOTSTRAP] Seed/bootstrap failed; continuing startup.")


@app.get("/")
def root() -> dict[str, str]:
    return {"name": settings.app_name, "docs": "/docs"}
