from __future__ import annotations

import logging
from datetime import date, datetime

from fleetdesk.constants import LOCAL_TZ, format_month
from fleetdesk.errors import ValidationError
from fleetdesk.models.bill import BillType
from fleetdesk.models.ledger import LedgerStatus
from fleetdesk.models.load import Load
from fleetdesk.models.payment import Payment, PaymentType
from fleetdesk.models.report import (
    BillsReport,
    BillsSummary,
    CombinedRow,
    MonthlyAnalytics,
    MonthlyRow,
    PaymentReportRow,
    ProfitLossRow,
)
from fleetdesk.repositories.base import (
    BillRepository,
    CompanyRepository,
    DriverRepository,
    LoadRepository,
    PaymentRepository,
)

logger = logging.getLogger(__name__)

MISSING = "N/A"


def profit_margin(revenue: int, net_profit: int) -> str:
    if revenue <= 0:
        return "0%"
    return f"{net_profit / revenue * 100:.2f}%"


class ReportService:
    def __init__(
        self,
        load_repo: LoadRepository,
        payment_repo: PaymentRepository,
        bill_repo: BillRepository,
        company_repo: CompanyRepository,
        driver_repo: DriverRepository,
    ) -> None:
        self.load_repo = load_repo
        self.payment_repo = payment_repo
        self.bill_repo = bill_repo
        self.company_repo = company_repo
        self.driver_repo = driver_repo

    def monthly_rental_analytics(self, year: int | None = None) -> MonthlyAnalytics:
        """Revenue (acquisition payments) vs cost (rental payments) per month of ``year``."""
        year = year or datetime.now(LOCAL_TZ).year
        start, end = date(year, 1, 1), date(year + 1, 1, 1)

        revenue = [0] * 13
        for payment in self.payment_repo.list_in_period(
            PaymentType.VEHICLE_ACQUISITION.value, "acquisition_date", start, end
        ):
            revenue[payment.acquisition_date.month] += payment.total_amount

        cost = [0] * 13
        for payment in self.payment_repo.list_in_period(PaymentType.DRIVER_RENTAL.value, "rental_date", start, end):
            cost[payment.rental_date.month] += payment.total_amount

        data = [
            MonthlyRow(
                month=format_month(month),
                month_number=month,
                revenue=revenue[month],
                cost=cost[month],
                profit=revenue[month] - cost[month],
            )
            for month in range(1, 13)
        ]
        logger.debug("Monthly analytics for %d: revenue=%d, cost=%d", year, sum(revenue), sum(cost))
        return MonthlyAnalytics(year=year, data=data)

    def _names(self) -> tuple[dict[int, str], dict[int, tuple[str, str]]]:
        companies = {c.id: c.name for c in self.company_repo.list_all()}
        drivers = {d.id: (d.name, d.iqama_id or MISSING) for d in self.driver_repo.list_all()}
        return companies, drivers

    def _loads_with_legs(self) -> list[tuple[Load, Payment | None, Payment | None]]:
        loads = self.load_repo.list_all()
        by_load: dict[int, dict[PaymentType, Payment]] = {}
        for payment in self.payment_repo.list_by_loads([load.id for load in loads]):
            by_load.setdefault(payment.load_id, {})[payment.payment_type] = payment
        result = []
        for load in loads:
            legs = by_load.get(load.id, {})
            result.append(
                (load, legs.get(PaymentType.VEHICLE_ACQUISITION), legs.get(PaymentType.DRIVER_RENTAL))
            )
        return result

    def combined_report(self) -> list[CombinedRow]:
        companies, drivers = self._names()
        rows = []
        for load, acquisition, rental in self._loads_with_legs():
            revenue = acquisition.total_amount if acquisition else 0
            cost = rental.total_amount if rental else 0
            rows.append(
                CombinedRow(
                    rental_code=load.rental_code,
                    company=companies.get(load.company_id, MISSING),
                    driver=drivers.get(load.driver_id, (MISSING, MISSING))[0],
                    from_location=load.from_location,
                    to_location=load.to_location,
                    vehicle_type=load.vehicle_type,
                    revenue=revenue,
                    revenue_paid=acquisition.total_paid if acquisition else 0,
                    revenue_due=acquisition.total_due if acquisition else 0,
                    revenue_status=acquisition.status if acquisition else LedgerStatus.UNPAID,
                    cost=cost,
                    cost_paid=rental.total_paid if rental else 0,
                    cost_due=rental.total_due if rental else 0,
                    cost_status=rental.status if rental else LedgerStatus.UNPAID,
                    net_profit=revenue - cost,
                    rental_date=load.rental_date,
                )
            )
        logger.debug("Combined report: %d rows", len(rows))
        return rows

    def profit_loss_report(self) -> list[ProfitLossRow]:
        """Loads whose acquisition and rental payments both exist and are fully paid."""
        companies, drivers = self._names()
        rows = []
        for load, acquisition, rental in self._loads_with_legs():
            if acquisition is None or rental is None:
                continue
            if acquisition.status != LedgerStatus.PAID or rental.status != LedgerStatus.PAID:
                continue
            net = acquisition.total_amount - rental.total_amount
            rows.append(
                ProfitLossRow(
                    rental_code=load.rental_code,
                    company=companies.get(load.company_id, MISSING),
                    driver=drivers.get(load.driver_id, (MISSING, MISSING))[0],
                    revenue=acquisition.total_amount,
                    cost=rental.total_amount,
                    net_profit=net,
                    profit_margin=profit_margin(acquisition.total_amount, net),
                    rental_date=load.rental_date,
                )
            )
        logger.debug("Profit/loss report: %d rows", len(rows))
        return rows

    def bills_report(self, bill_type: str | None = None, status: str | None = None) -> BillsReport:
        bills = self.bill_repo.list_all(bill_type=bill_type, status=status)
        income = sum(b.total_amount for b in bills if b.type == BillType.INCOME)
        expense = sum(b.total_amount for b in bills if b.type == BillType.EXPENSE)
        summary = BillsSummary(
            total_income=income,
            total_expense=expense,
            net_balance=income - expense,
            total_paid=sum(b.paid_amount for b in bills),
            total_due=sum(b.due_amount for b in bills),
        )
        return BillsReport(summary=summary, data=bills)

    def payments_report(self, payment_type: str) -> list[PaymentReportRow]:
        try:
            kind = PaymentType(payment_type)
        except ValueError:
            raise ValidationError(
                f"Unknown payment type: {payment_type}",
                [f"payment_type: must be one of {', '.join(t.value for t in PaymentType)}"],
            ) from None
        companies, drivers = self._names()
        loads = {load.id: load.rental_code for load in self.load_repo.list_all()}
        rows = []
        for payment in self.payment_repo.list_all(payment_type=kind.value):
            driver_name, iqama_id = drivers.get(payment.driver_id, (MISSING, MISSING))
            rows.append(
                PaymentReportRow(
                    receipt_code=payment.receipt_code,
                    payment_type=payment.payment_type.value,
                    company=companies.get(payment.company_id, MISSING),
                    driver=driver_name,
                    iqama_id=iqama_id,
                    load_code=loads.get(payment.load_id, MISSING),
                    payer=payment.payer,
                    payee=payment.payee,
                    total_amount=payment.total_amount,
                    total_paid=payment.total_paid,
                    total_due=payment.total_due,
                    status=payment.status,
                    transaction_date=payment.transaction_date,
                    installments=payment.installments,
                )
            )
        logger.debug("Payments report (%s): %d rows", kind.value, len(rows))
        return rows
