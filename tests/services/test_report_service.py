from datetime import date

import pytest
from freezegun import freeze_time

from fleetdesk.errors import ValidationError
from fleetdesk.models.bill import BillType
from fleetdesk.models.ledger import LedgerStatus
from fleetdesk.models.load import Load
from fleetdesk.models.payment import PaymentType
from fleetdesk.models.transaction import RentalTransactionInput
from fleetdesk.services import ledger
from fleetdesk.services.bill_service import BillService


def _transaction(service, rental_input, **overrides):
    return service.create_rental_transaction(RentalTransactionInput.model_validate(rental_input(**overrides)))


def _pay_in_full(repos, payment_uuid: str) -> None:
    payment = repos["payment"].get_by_uuid(payment_uuid)
    ledger.add_installment(payment, payment.total_due, "2026-04-01")
    repos["payment"].update(payment)


class TestMonthlyRentalAnalytics:
    def test_groups_by_month_and_zero_fills(self, report_service, transaction_service, rental_input):
        _transaction(transaction_service, rental_input)
        _transaction(
            transaction_service,
            rental_input,
            acquisition_cost=200000,
            acquisition_date="2026-03-20",
            rental_amount=50000,
            rental_date="2026-07-02",
        )
        _transaction(
            transaction_service,
            rental_input,
            acquisition_date="2025-03-01",
            rental_date="2025-03-05",
        )

        result = report_service.monthly_rental_analytics(2026)

        assert result.year == 2026
        assert len(result.data) == 12
        march = result.data[2]
        assert (march.month, march.month_number) == ("Mar", 3)
        assert march.revenue == 700000
        assert march.cost == 300000
        assert march.profit == 400000
        july = result.data[6]
        assert (july.revenue, july.cost, july.profit) == (0, 50000, -50000)
        assert result.data[0].revenue == result.data[0].cost == 0

    @freeze_time("2026-05-01")
    def test_defaults_to_current_year(self, report_service):
        result = report_service.monthly_rental_analytics()
        assert result.year == 2026
        assert all(row.profit == 0 for row in result.data)


class TestCombinedReport:
    def test_joins_both_legs(self, report_service, transaction_service, rental_input, repos):
        summary = _transaction(transaction_service, rental_input)
        _pay_in_full(repos, summary.payments.rental_payment_id)

        rows = report_service.combined_report()

        assert len(rows) == 1
        row = rows[0]
        assert row.rental_code == summary.load.rental_code
        assert row.company == "Al Noor Logistics"
        assert row.driver == "Faisal Khan"
        assert row.revenue == 500000
        assert row.revenue_status == LedgerStatus.UNPAID
        assert row.revenue_due == 500000
        assert row.cost == 300000
        assert row.cost_paid == 300000
        assert row.cost_status == LedgerStatus.PAID
        assert row.net_profit == 200000

    def test_load_without_acquisition_leg(self, report_service, load_service):
        load_service.create_load(
            Load(vehicle_type="Dyna", from_location="Abha", to_location="Tabuk", rental_amount=1000)
        )
        row = report_service.combined_report()[0]
        assert row.revenue == 0
        assert row.cost == 1000
        assert row.company == "N/A"
        assert row.net_profit == -1000


class TestProfitLossReport:
    def test_only_fully_paid_transactions(self, report_service, transaction_service, rental_input, repos):
        paid = _transaction(transaction_service, rental_input)
        _transaction(transaction_service, rental_input)
        _pay_in_full(repos, paid.payments.rental_payment_id)
        _pay_in_full(repos, paid.payments.acquisition_payment_id)

        rows = report_service.profit_loss_report()

        assert [r.rental_code for r in rows] == [paid.load.rental_code]
        assert rows[0].net_profit == 200000
        assert rows[0].profit_margin == "40.00%"


class TestBillsReport:
    def test_summary(self, report_service, repos):
        bills = BillService(repos["bill"])
        income = bills.create_bill(BillType.INCOME, "Storage fees", 100000, date(2026, 3, 1))
        bills.create_bill(BillType.EXPENSE, "Diesel", 40000, date(2026, 3, 2))
        bills.add_installment(income.uuid, 25000, "2026-03-03")

        report = report_service.bills_report()

        assert report.summary.total_income == 100000
        assert report.summary.total_expense == 40000
        assert report.summary.net_balance == 60000
        assert report.summary.total_paid == 25000
        assert report.summary.total_due == 115000
        assert len(report.data) == 2

    def test_filtered(self, report_service, repos):
        bills = BillService(repos["bill"])
        bills.create_bill(BillType.EXPENSE, "Diesel", 40000, date(2026, 3, 2))
        report = report_service.bills_report(bill_type="income")
        assert report.data == []
        assert report.summary.net_balance == 0


class TestPaymentsReport:
    def test_rows_resolve_names(self, report_service, transaction_service, rental_input, repos):
        summary = _transaction(transaction_service, rental_input)
        payment = repos["payment"].get_by_uuid(summary.payments.rental_payment_id)
        ledger.add_installment(payment, 1000, "2026-03-06", "cash")
        repos["payment"].update(payment)

        rows = report_service.payments_report(PaymentType.DRIVER_RENTAL.value)

        assert len(rows) == 1
        assert rows[0].driver == "Faisal Khan"
        assert rows[0].iqama_id == "2400000001"
        assert rows[0].company == "Al Noor Logistics"
        assert rows[0].load_code == summary.load.rental_code
        assert rows[0].total_paid == 1000
        assert len(rows[0].installments) == 1

    def test_unknown_type(self, report_service):
        with pytest.raises(ValidationError):
            report_service.payments_report("fuel")
