from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from fleetdesk.models.bill import Bill
from fleetdesk.models.ledger import Installment, LedgerStatus


class MonthlyRow(BaseModel):
    month: str
    month_number: int
    revenue: int = 0
    cost: int = 0
    profit: int = 0


class MonthlyAnalytics(BaseModel):
    year: int
    data: list[MonthlyRow]


class CombinedRow(BaseModel):
    rental_code: str
    company: str
    driver: str
    from_location: str
    to_location: str
    vehicle_type: str
    revenue: int
    revenue_paid: int
    revenue_due: int
    revenue_status: LedgerStatus
    cost: int
    cost_paid: int
    cost_due: int
    cost_status: LedgerStatus
    net_profit: int
    rental_date: date | None = None


class ProfitLossRow(BaseModel):
    rental_code: str
    company: str
    driver: str
    revenue: int
    cost: int
    net_profit: int
    profit_margin: str
    rental_date: date | None = None


class BillsSummary(BaseModel):
    total_income: int = 0
    total_expense: int = 0
    net_balance: int = 0
    total_paid: int = 0
    total_due: int = 0


class BillsReport(BaseModel):
    summary: BillsSummary
    data: list[Bill]


class PaymentReportRow(BaseModel):
    receipt_code: str
    payment_type: str
    company: str
    driver: str
    iqama_id: str
    load_code: str
    payer: str
    payee: str
    total_amount: int
    total_paid: int
    total_due: int
    status: LedgerStatus
    transaction_date: date | None = None
    installments: list[Installment] = []
