from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response

from fleetdesk.constants import PAYMENT_TYPE_LABELS
from fleetdesk.models.report import BillsReport, CombinedRow, PaymentReportRow, ProfitLossRow
from fleetdesk.reports import excel
from web.deps import (
    get_company_service,
    get_driver_service,
    get_load_service,
    get_report_service,
    get_vehicle_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


def _xlsx(report_name: str, content: bytes) -> Response:
    filename = excel.export_filename(report_name)
    logger.info("Excel export %s (%d bytes)", filename, len(content))
    return Response(
        content=content,
        media_type=excel.XLSX_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/combined")
async def combined_report(request: Request) -> list[CombinedRow]:
    return get_report_service(request).combined_report()


@router.get("/combined/excel")
async def combined_report_excel(request: Request) -> Response:
    rows = get_report_service(request).combined_report()
    return _xlsx("Combined Report", excel.combined_workbook(rows))


@router.get("/profit-loss")
async def profit_loss_report(request: Request) -> list[ProfitLossRow]:
    return get_report_service(request).profit_loss_report()


@router.get("/profit-loss/excel")
async def profit_loss_report_excel(request: Request) -> Response:
    rows = get_report_service(request).profit_loss_report()
    return _xlsx("Profit Loss Report", excel.profit_loss_workbook(rows))


@router.get("/bills")
async def bills_report(
    request: Request,
    bill_type: str | None = Query(default=None, alias="type"),
    status: str | None = None,
) -> BillsReport:
    return get_report_service(request).bills_report(bill_type=bill_type, status=status)


@router.get("/bills/excel")
async def bills_report_excel(
    request: Request,
    bill_type: str | None = Query(default=None, alias="type"),
    status: str | None = None,
) -> Response:
    report = get_report_service(request).bills_report(bill_type=bill_type, status=status)
    return _xlsx("Income Expense Report", excel.bills_workbook(report.data))


@router.get("/payments/{payment_type}")
async def payments_report(request: Request, payment_type: str) -> list[PaymentReportRow]:
    return get_report_service(request).payments_report(payment_type)


@router.get("/payments/{payment_type}/excel")
async def payments_report_excel(request: Request, payment_type: str) -> Response:
    rows = get_report_service(request).payments_report(payment_type)
    title = f"{PAYMENT_TYPE_LABELS[payment_type]} Payments"
    return _xlsx(title, excel.payments_workbook(title, rows))


@router.get("/companies")
async def company_report(request: Request) -> Response:
    companies = get_company_service(request).list_companies()
    return _xlsx("Company Report", excel.company_report_workbook(companies))


@router.get("/drivers")
async def driver_report(request: Request) -> Response:
    drivers = get_driver_service(request).list_drivers()
    return _xlsx("Driver Report", excel.driver_report_workbook(drivers))


@router.get("/vehicles")
async def vehicle_report(request: Request) -> Response:
    vehicles = get_vehicle_service(request).list_vehicles()
    company_names = {c.id: c.name for c in get_company_service(request).list_companies()}
    return _xlsx("Vehicle Report", excel.vehicle_report_workbook(vehicles, company_names))


@router.get("/loads")
async def load_report(request: Request, status: str | None = None) -> Response:
    loads = get_load_service(request).list_loads(status=status)
    company_names = {c.id: c.name for c in get_company_service(request).list_companies()}
    driver_names = {d.id: d.name for d in get_driver_service(request).list_drivers()}
    return _xlsx("Load Report", excel.load_report_workbook(loads, company_names, driver_names))
