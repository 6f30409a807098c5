from __future__ import annotations

import hmac
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from fleetdesk.db import get_engine
from fleetdesk.repositories.sqlalchemy import (
    SQLAlchemyBillRepository,
    SQLAlchemyCodeCounterRepository,
    SQLAlchemyCompanyRepository,
    SQLAlchemyDriverRepository,
    SQLAlchemyLoadRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyVehicleRepository,
)
from fleetdesk.services.bill_service import BillService
from fleetdesk.services.code_service import CodeGenerator
from fleetdesk.services.company_service import CompanyService
from fleetdesk.services.driver_service import DriverService
from fleetdesk.services.load_service import LoadService
from fleetdesk.services.payment_service import PaymentService
from fleetdesk.services.receipt_service import ReceiptService
from fleetdesk.services.report_service import ReportService
from fleetdesk.services.transaction_service import TransactionService
from fleetdesk.services.vehicle_service import VehicleService
from fleetdesk.settings import settings

logger = logging.getLogger(__name__)

PUBLIC_EXACT_PATHS = {"/health"}


class ApiTokenMiddleware:
    """Pure ASGI middleware: requires ``Authorization: Bearer <token>`` when a token is configured."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not settings.auth_enabled():
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        path = request.url.path
        if path in PUBLIC_EXACT_PATHS:
            await self.app(scope, receive, send)
            return

        header = request.headers.get("authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not hmac.compare_digest(token.strip(), settings.api_token):
            logger.info("Rejected unauthenticated request: %s %s", request.method, path)
            response = JSONResponse({"message": "Unauthorized"}, status_code=401)
            await response(scope, receive, send)
            return
        await self.app(scope, receive, send)


class DBConnectionMiddleware:
    """Pure ASGI middleware: creates a single DB connection per request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request.state.db_conn = None
        try:
            await self.app(scope, receive, send)
        finally:
            conn = getattr(request.state, "db_conn", None)
            if conn is not None:
                conn.close()
                logger.debug("DB connection closed for %s %s", request.method, request.url.path)


def _get_conn(request: Request):
    """Lazy per-request connection: created on first use, closed by middleware."""
    if request.state.db_conn is None:
        logger.debug("Creating DB connection for %s %s", request.method, request.url.path)
        request.state.db_conn = get_engine().connect()
    return request.state.db_conn


def _codes(conn) -> CodeGenerator:
    return CodeGenerator(SQLAlchemyCodeCounterRepository(conn))


def get_bill_service(request: Request) -> BillService:
    return BillService(SQLAlchemyBillRepository(_get_conn(request)))


def get_payment_service(request: Request) -> PaymentService:
    conn = _get_conn(request)
    return PaymentService(SQLAlchemyPaymentRepository(conn), _codes(conn))


def get_company_service(request: Request) -> CompanyService:
    conn = _get_conn(request)
    return CompanyService(SQLAlchemyCompanyRepository(conn), _codes(conn))


def get_driver_service(request: Request) -> DriverService:
    conn = _get_conn(request)
    return DriverService(SQLAlchemyDriverRepository(conn), _codes(conn))


def get_vehicle_service(request: Request) -> VehicleService:
    conn = _get_conn(request)
    codes = _codes(conn)
    return VehicleService(
        SQLAlchemyVehicleRepository(conn),
        SQLAlchemyCompanyRepository(conn),
        PaymentService(SQLAlchemyPaymentRepository(conn), codes),
        codes,
    )


def get_load_service(request: Request) -> LoadService:
    conn = _get_conn(request)
    return LoadService(
        SQLAlchemyLoadRepository(conn),
        SQLAlchemyPaymentRepository(conn),
        SQLAlchemyDriverRepository(conn),
        SQLAlchemyVehicleRepository(conn),
        SQLAlchemyCompanyRepository(conn),
        _codes(conn),
    )


def get_transaction_service(request: Request) -> TransactionService:
    conn = _get_conn(request)
    return TransactionService(
        SQLAlchemyCompanyRepository(conn),
        SQLAlchemyDriverRepository(conn),
        SQLAlchemyLoadRepository(conn),
        SQLAlchemyPaymentRepository(conn),
        _codes(conn),
    )


def get_report_service(request: Request) -> ReportService:
    conn = _get_conn(request)
    return ReportService(
        SQLAlchemyLoadRepository(conn),
        SQLAlchemyPaymentRepository(conn),
        SQLAlchemyBillRepository(conn),
        SQLAlchemyCompanyRepository(conn),
        SQLAlchemyDriverRepository(conn),
    )


def get_receipt_service(request: Request) -> ReceiptService:
    conn = _get_conn(request)
    return ReceiptService(
        SQLAlchemyPaymentRepository(conn),
        SQLAlchemyCompanyRepository(conn),
        SQLAlchemyDriverRepository(conn),
    )
