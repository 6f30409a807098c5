from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fleetdesk.db import dispose_engine, initialize_db
from fleetdesk.errors import FleetDeskError, ValidationError
from fleetdesk.logging import configure_logging, reconfigure
from web.deps import ApiTokenMiddleware, DBConnectionMiddleware
from web.routes.bills import router as bills_router
from web.routes.companies import router as companies_router
from web.routes.dashboard import router as dashboard_router
from web.routes.drivers import router as drivers_router
from web.routes.loads import router as loads_router
from web.routes.payments import router as payments_router
from web.routes.receipts import router as receipts_router
from web.routes.reports import router as reports_router
from web.routes.transactions import router as transactions_router
from web.routes.vehicles import router as vehicles_router

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    initialize_db()
    # Alembic's fileConfig replaces the root handlers.
    reconfigure()
    logger.info("Application started")
    yield
    dispose_engine()
    logger.info("Application stopped")


app = FastAPI(title="FleetDesk", lifespan=lifespan)

app.add_middleware(DBConnectionMiddleware)
app.add_middleware(ApiTokenMiddleware)

app.include_router(bills_router)
app.include_router(payments_router)
app.include_router(transactions_router)
app.include_router(loads_router)
app.include_router(companies_router)
app.include_router(drivers_router)
app.include_router(vehicles_router)
app.include_router(dashboard_router)
app.include_router(reports_router)
app.include_router(receipts_router)


def _error_body(exc: FleetDeskError) -> dict:
    body: dict = {"message": exc.message}
    if isinstance(exc, ValidationError) and exc.errors:
        body["errors"] = exc.errors
    return body


@app.exception_handler(FleetDeskError)
async def fleetdesk_error_handler(request: Request, exc: FleetDeskError):
    logger.info("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(_error_body(exc), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}" for err in exc.errors()
    ]
    logger.info("%s %s -> 400: %s", request.method, request.url.path, errors)
    return JSONResponse({"message": "Validation failed", "errors": errors}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return JSONResponse({"message": "Internal server error"}, status_code=500)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
