"""Spreadsheet exports of the JSON reports and of the entity registers.

Amounts are written as SAR numbers (halalas / 100) with a currency number
format; installments are expanded into as many trailing columns as the
longest ledger needs.
"""

from __future__ import annotations

import io
import logging
from datetime import date, datetime

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from fleetdesk.constants import LOCAL_TZ
from fleetdesk.models.bill import Bill
from fleetdesk.models.company import Company
from fleetdesk.models.driver import Driver
from fleetdesk.models.ledger import Installment
from fleetdesk.models.load import Load
from fleetdesk.models.report import CombinedRow, PaymentReportRow, ProfitLossRow
from fleetdesk.models.vehicle import Vehicle

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
MONEY_FORMAT = "#,##0.00"

Column = tuple[str, int, bool]  # header, width, is_money


def _sar(halalas: int) -> float:
    return halalas / 100


def _fmt_date(value: date | None) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat() if value else "N/A"


def _installment_text(installment: Installment, with_notes: bool = False) -> str:
    text = f"{_sar(installment.amount):,.2f} ({installment.paid_date.isoformat()})"
    if with_notes and installment.notes:
        text += f" - {installment.notes}"
    return text


def build_workbook(sheet_name: str, columns: list[Column], rows: list[list]) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_name[:31]

    header_fill = PatternFill("solid", fgColor="D9E1F2")
    ws.append([header for header, _, _ in columns])
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")
        cell.fill = header_fill
    ws.freeze_panes = "A2"

    for row in rows:
        ws.append(row)
        for index, (_, _, is_money) in enumerate(columns, start=1):
            if is_money:
                ws.cell(ws.max_row, index).number_format = MONEY_FORMAT

    for index, (_, width, _) in enumerate(columns, start=1):
        ws.column_dimensions[get_column_letter(index)].width = width

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.debug("Workbook %r built with %d rows", sheet_name, len(rows))
    return buffer.getvalue()


def export_filename(report_name: str) -> str:
    stamp = datetime.now(LOCAL_TZ).strftime("%Y-%m-%d-%H%M%S")
    return f"{report_name.lower().replace(' ', '-')}-{stamp}.xlsx"


def combined_workbook(rows: list[CombinedRow]) -> bytes:
    columns: list[Column] = [
        ("Rental Code", 20, False),
        ("Company", 25, False),
        ("Driver", 25, False),
        ("From", 20, False),
        ("To", 20, False),
        ("Vehicle Type", 20, False),
        ("Revenue", 15, True),
        ("Revenue Paid", 15, True),
        ("Revenue Due", 15, True),
        ("Cost", 15, True),
        ("Cost Paid", 15, True),
        ("Cost Due", 15, True),
        ("Net Profit/Loss", 18, True),
        ("Rental Date", 15, False),
    ]
    data = [
        [
            r.rental_code,
            r.company,
            r.driver,
            r.from_location,
            r.to_location,
            r.vehicle_type,
            _sar(r.revenue),
            _sar(r.revenue_paid),
            _sar(r.revenue_due),
            _sar(r.cost),
            _sar(r.cost_paid),
            _sar(r.cost_due),
            _sar(r.net_profit),
            _fmt_date(r.rental_date),
        ]
        for r in rows
    ]
    return build_workbook("Combined Report", columns, data)


def profit_loss_workbook(rows: list[ProfitLossRow]) -> bytes:
    columns: list[Column] = [
        ("Rental Code", 20, False),
        ("Company", 25, False),
        ("Driver", 25, False),
        ("Revenue", 15, True),
        ("Cost", 15, True),
        ("Net Profit/Loss", 18, True),
        ("Profit Margin", 15, False),
        ("Rental Date", 15, False),
    ]
    data = [
        [
            r.rental_code,
            r.company,
            r.driver,
            _sar(r.revenue),
            _sar(r.cost),
            _sar(r.net_profit),
            r.profit_margin,
            _fmt_date(r.rental_date),
        ]
        for r in rows
    ]
    return build_workbook("Profit Loss Report", columns, data)


def bills_workbook(bills: list[Bill]) -> bytes:
    max_installments = max((len(b.installments) for b in bills), default=0)
    columns: list[Column] = [
        ("Type", 12, False),
        ("Name", 30, False),
        ("Total Amount", 15, True),
        ("Paid Amount", 15, True),
        ("Dues", 15, True),
        ("Status", 12, False),
        ("Date", 15, False),
    ]
    columns += [(f"Payment {i + 1}", 26, False) for i in range(max_installments)]
    data = [
        [
            b.type.value,
            b.name,
            _sar(b.total_amount),
            _sar(b.paid_amount),
            _sar(b.due_amount),
            b.status.value,
            _fmt_date(b.date),
            *[_installment_text(i, with_notes=True) for i in b.installments],
        ]
        for b in bills
    ]
    return build_workbook("Income & Expense Report", columns, data)


def payments_workbook(title: str, rows: list[PaymentReportRow]) -> bytes:
    max_installments = max((len(r.installments) for r in rows), default=0)
    columns: list[Column] = [
        ("Receipt", 14, False),
        ("Payment Type", 20, False),
        ("Company", 25, False),
        ("Driver", 25, False),
        ("Iqama ID", 20, False),
        ("Load Code", 20, False),
        ("Total Amount", 15, True),
        ("Paid", 15, True),
        ("Due", 15, True),
        ("Status", 15, False),
        ("Transaction Date", 20, False),
    ]
    columns += [(f"Installment {i + 1}", 22, False) for i in range(max_installments)]
    data = [
        [
            r.receipt_code,
            r.payment_type,
            r.company,
            r.driver,
            r.iqama_id,
            r.load_code,
            _sar(r.total_amount),
            _sar(r.total_paid),
            _sar(r.total_due),
            r.status.value,
            _fmt_date(r.transaction_date),
            *[_installment_text(i) for i in r.installments],
        ]
        for r in rows
    ]
    return build_workbook(title, columns, data)


def _phone(country_code: str, number: str) -> str:
    return f"{country_code}{number}" if number else ""


def company_report_workbook(companies: list[Company]) -> bytes:
    columns: list[Column] = [
        ("Code", 12, False),
        ("Name", 25, False),
        ("Contact", 25, False),
        ("Email", 30, False),
        ("Address", 30, False),
        ("Phone", 20, False),
        ("Created At", 15, False),
    ]
    data = [
        [c.company_code, c.name, c.contact, c.email, c.address, c.phone, _fmt_date(c.created_at)]
        for c in companies
    ]
    return build_workbook("Company Report", columns, data)


def driver_report_workbook(drivers: list[Driver]) -> bytes:
    columns: list[Column] = [
        ("Code", 12, False),
        ("Name", 25, False),
        ("Iqama ID", 20, False),
        ("Phone", 20, False),
        ("Status", 12, False),
        ("Created At", 15, False),
    ]
    data = [
        [
            d.driver_code,
            d.name,
            d.iqama_id or "",
            _phone(d.phone_country_code, d.phone_number),
            d.status.value,
            _fmt_date(d.created_at),
        ]
        for d in drivers
    ]
    return build_workbook("Driver Report", columns, data)


def vehicle_report_workbook(vehicles: list[Vehicle], company_names: dict[int, str]) -> bytes:
    columns: list[Column] = [
        ("Code", 12, False),
        ("Vehicle Type", 20, False),
        ("Plate Number", 20, False),
        ("Company", 25, False),
        ("Status", 12, False),
        ("Acquisition Cost", 20, True),
        ("Acquisition Date", 20, False),
    ]
    data = [
        [
            v.vehicle_code,
            v.vehicle_type or "N/A",
            v.plate_no or "N/A",
            company_names.get(v.company_id, "N/A"),
            v.status.value,
            _sar(v.acquisition_cost),
            _fmt_date(v.acquisition_date),
        ]
        for v in vehicles
    ]
    return build_workbook("Vehicle Report", columns, data)


def load_report_workbook(loads: list[Load], company_names: dict[int, str], driver_names: dict[int, str]) -> bytes:
    columns: list[Column] = [
        ("Rental Code", 20, False),
        ("Company", 25, False),
        ("Driver", 25, False),
        ("From", 20, False),
        ("To", 20, False),
        ("Vehicle Type", 20, False),
        ("Status", 12, False),
        ("Rental Amount", 15, True),
        ("Created At", 15, False),
    ]
    data = [
        [
            ld.rental_code,
            company_names.get(ld.company_id, "N/A"),
            driver_names.get(ld.driver_id, "N/A"),
            ld.from_location,
            ld.to_location,
            ld.vehicle_type,
            ld.status.value,
            _sar(ld.rental_amount),
            _fmt_date(ld.created_at),
        ]
        for ld in loads
    ]
    return build_workbook("Load Report", columns, data)
