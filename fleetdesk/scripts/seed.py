"""Seed the database with demo data for local development.

Usage:
    python -m fleetdesk.scripts.seed
"""

from __future__ import annotations

import random
from datetime import date, timedelta

from faker import Faker
from rich.console import Console
from rich.table import Table
from sqlalchemy import text

from fleetdesk.db import get_connection, initialize_db
from fleetdesk.models import format_sar
from fleetdesk.models.bill import BillType
from fleetdesk.models.transaction import RentalTransactionInput
from fleetdesk.repositories.factory import (
    get_bill_repository,
    get_code_counter_repository,
    get_company_repository,
    get_driver_repository,
    get_load_repository,
    get_payment_repository,
)
from fleetdesk.services.bill_service import BillService
from fleetdesk.services.code_service import CodeGenerator
from fleetdesk.services.payment_service import PaymentService
from fleetdesk.services.transaction_service import TransactionService

console = Console()
fake = Faker("en_US")

NUM_TRANSACTIONS = 12
NUM_BILLS = 8

TABLES_TO_TRUNCATE = [
    "payment_installments",
    "bill_installments",
    "payments",
    "loads",
    "vehicles",
    "drivers",
    "companies",
    "bills",
    "code_counters",
]

COMPANY_NAMES = [
    "Al Noor Logistics",
    "Desert Line Transport",
    "Red Sea Haulage",
    "Najd Freight Co.",
]

VEHICLE_TYPES = ["Trailer", "Flatbed", "Reefer", "Lowbed", "Dyna"]

CITIES = ["Riyadh", "Jeddah", "Dammam", "Makkah", "Madinah", "Tabuk", "Abha", "Jubail"]

BILL_TEMPLATES = [
    (BillType.EXPENSE, "Diesel"),
    (BillType.EXPENSE, "Workshop repairs"),
    (BillType.EXPENSE, "Office rent"),
    (BillType.EXPENSE, "Tyres"),
    (BillType.INCOME, "Storage fees"),
    (BillType.INCOME, "Consulting"),
]


def _truncate_all(conn) -> None:
    """Empty every table; MySQL needs FK checks off to TRUNCATE."""
    console.print("\n[yellow]Truncating all tables...[/yellow]")
    mysql = conn.dialect.name == "mysql"
    if mysql:
        conn.execute(text("SET FOREIGN_KEY_CHECKS = 0"))
    for table in TABLES_TO_TRUNCATE:
        statement = f"TRUNCATE TABLE {table}" if mysql else f"DELETE FROM {table}"
        conn.execute(text(statement))  # noqa: S608
        console.print(f"  Truncated [dim]{table}[/dim]")
    if mysql:
        conn.execute(text("SET FOREIGN_KEY_CHECKS = 1"))
    conn.commit()
    console.print("[green]All tables truncated.[/green]\n")


def _random_transaction(drivers: list[tuple[str, str]]) -> dict:
    origin, destination = random.sample(CITIES, 2)
    start = date.today() - timedelta(days=random.randint(0, 300))
    name, iqama_id = random.choice(drivers)
    return {
        "company": {"kind": "new", "name": random.choice(COMPANY_NAMES)},
        "driver": {"kind": "new", "name": name, "iqama_id": iqama_id},
        "vehicle_type": random.choice(VEHICLE_TYPES),
        "plate_no": fake.bothify("???-####").upper(),
        "acquisition_cost": random.randint(20, 80) * 100_000,
        "acquisition_date": start - timedelta(days=random.randint(1, 30)),
        "from_location": origin,
        "to_location": destination,
        "rental_type": "per_day",
        "rental_price_per_day": random.randint(5, 15) * 10_000,
        "start_date": start,
        "end_date": start + timedelta(days=random.randint(1, 10)),
        "rental_date": start,
    }


def _create_transactions(transactions: TransactionService, payments: PaymentService) -> int:
    console.print("[cyan]Creating rental transactions...[/cyan]")
    drivers = [(fake.name(), fake.numerify("2#########")) for _ in range(5)]

    table = Table(title="Rental transactions")
    table.add_column("Rental", style="bold")
    table.add_column("Company")
    table.add_column("Driver")
    table.add_column("Route")
    table.add_column("Rental amount", justify="right")
    table.add_column("Acquisition", justify="right")

    for _ in range(NUM_TRANSACTIONS):
        data = RentalTransactionInput.model_validate(_random_transaction(drivers))
        summary = transactions.create_rental_transaction(data)

        # Pay part of some rentals so the reports have partial and paid rows.
        if random.random() > 0.4:
            amount = summary.payments.rental_amount
            if random.random() > 0.5:
                amount //= 2
            payments.add_installment(summary.payments.rental_payment_id, amount, data.rental_date, "Cash")
        if random.random() > 0.6:
            payments.add_installment(
                summary.payments.acquisition_payment_id,
                summary.payments.acquisition_amount,
                data.acquisition_date,
                "Bank transfer",
            )

        table.add_row(
            summary.load.rental_code,
            summary.company.name,
            summary.driver.name,
            f"{summary.load.from_location} -> {summary.load.to_location}",
            format_sar(summary.payments.rental_amount),
            format_sar(summary.payments.acquisition_amount),
        )

    console.print(table)
    return NUM_TRANSACTIONS


def _create_bills(bills: BillService) -> int:
    console.print("[cyan]Creating bills...[/cyan]")
    today = date.today()
    for _ in range(NUM_BILLS):
        bill_type, name = random.choice(BILL_TEMPLATES)
        total = random.randint(5, 50) * 10_000
        bill_date = today - timedelta(days=random.randint(0, 180))
        bill = bills.create_bill(bill_type, name, total, bill_date)
        if random.random() > 0.5:
            bills.add_installment(bill.uuid, total // 2, bill_date, "First half")
        console.print(f"  [bold]{bill.name}[/bold] ({bill.type.value}) {format_sar(total)}")
    console.print(f"[green]{NUM_BILLS} bills created.[/green]\n")
    return NUM_BILLS


def main() -> None:
    console.print("[bold magenta]FleetDesk - Database Seeder[/bold magenta]")
    console.print("=" * 40)

    initialize_db()
    conn = get_connection()

    _truncate_all(conn)

    codes = CodeGenerator(get_code_counter_repository())
    payment_service = PaymentService(get_payment_repository(), codes)
    transaction_service = TransactionService(
        get_company_repository(),
        get_driver_repository(),
        get_load_repository(),
        get_payment_repository(),
        codes,
    )
    bill_service = BillService(get_bill_repository())

    total_transactions = _create_transactions(transaction_service, payment_service)
    total_bills = _create_bills(bill_service)

    console.print("[bold green]Seeding complete![/bold green]")
    console.print(f"  Rental transactions: {total_transactions}")
    console.print(f"  Bills:               {total_bills}")


if __name__ == "__main__":  # pragma: no cover
    main()
