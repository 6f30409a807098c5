"""initial schema

Revision ID: 3f9c1a7d2b4e
Revises:
Create Date: 2026-09-28
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "3f9c1a7d2b4e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime, nullable=True),
    ]


def _installments(table: str, owner_table: str, owner_column: str) -> None:
    op.create_table(
        table,
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            owner_column,
            sa.Integer,
            sa.ForeignKey(f"{owner_table}.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("paid_date", sa.Date, nullable=False),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index(f"ix_{table}_{owner_column}", table, [owner_column])


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("company_code", sa.String(32), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("contact", sa.String(255), nullable=False, server_default=""),
        sa.Column("address", sa.Text, nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False, server_default=""),
        sa.Column("phone_country_code", sa.String(8), nullable=False, server_default="+91"),
        sa.Column("phone_number", sa.String(32), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_companies_name", "companies", ["name"])

    op.create_table(
        "drivers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("driver_code", sa.String(32), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("contact", sa.String(255), nullable=False, server_default=""),
        sa.Column("license_no", sa.String(64), nullable=True),
        sa.Column("iqama_id", sa.String(64), nullable=True, unique=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("email", sa.String(255), nullable=False, server_default=""),
        sa.Column("phone_country_code", sa.String(8), nullable=False, server_default="+966"),
        sa.Column("phone_number", sa.String(32), nullable=False, server_default=""),
        sa.Column("address", sa.Text, nullable=False, server_default=""),
        *_timestamps(),
    )

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("vehicle_code", sa.String(32), nullable=False, unique=True),
        sa.Column("company_id", sa.Integer, sa.ForeignKey("companies.id"), nullable=False),
        sa.Column("vehicle_type", sa.String(100), nullable=False),
        sa.Column("plate_no", sa.String(32), nullable=False, unique=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="available"),
        sa.Column("manufacturer", sa.String(100), nullable=False, server_default=""),
        sa.Column("year", sa.Integer, nullable=True),
        sa.Column("capacity", sa.Integer, nullable=True),
        sa.Column("acquisition_cost", sa.Integer, nullable=False, server_default="0"),
        sa.Column("acquisition_type", sa.String(16), nullable=False, server_default="bought"),
        sa.Column("acquisition_date", sa.Date, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "loads",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("rental_code", sa.String(32), nullable=False, unique=True),
        sa.Column("vehicle_id", sa.Integer, sa.ForeignKey("vehicles.id"), nullable=True),
        sa.Column("vehicle_type", sa.String(100), nullable=False),
        sa.Column("plate_no", sa.String(32), nullable=False, server_default=""),
        sa.Column("company_id", sa.Integer, sa.ForeignKey("companies.id"), nullable=True),
        sa.Column("driver_id", sa.Integer, sa.ForeignKey("drivers.id"), nullable=True),
        sa.Column("from_location", sa.String(255), nullable=False),
        sa.Column("to_location", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("rental_type", sa.String(16), nullable=False, server_default="per_day"),
        sa.Column("rental_price_per_day", sa.Integer, nullable=False, server_default="0"),
        sa.Column("distance_km", sa.Float, nullable=True),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("days_rented", sa.Integer, nullable=False, server_default="0"),
        sa.Column("rental_amount", sa.Integer, nullable=False, server_default="0"),
        sa.Column("rental_date", sa.Date, nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        *_timestamps(),
    )
    op.create_index("ix_loads_status", "loads", ["status"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("receipt_code", sa.String(32), nullable=False, unique=True),
        sa.Column("payment_type", sa.String(32), nullable=False),
        sa.Column("payer", sa.String(255), nullable=False),
        sa.Column("payer_type", sa.String(16), nullable=True),
        sa.Column("payer_id", sa.Integer, nullable=True),
        sa.Column("payee", sa.String(255), nullable=False, server_default=""),
        sa.Column("payee_type", sa.String(16), nullable=True),
        sa.Column("payee_id", sa.Integer, nullable=True),
        sa.Column("total_amount", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_paid", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_due", sa.Integer, nullable=False, server_default="0"),
        sa.Column("status", sa.String(16), nullable=False, server_default="unpaid"),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("vehicle_type", sa.String(100), nullable=False, server_default=""),
        sa.Column("plate_no", sa.String(32), nullable=False, server_default=""),
        sa.Column("from_location", sa.String(255), nullable=False, server_default=""),
        sa.Column("to_location", sa.String(255), nullable=False, server_default=""),
        sa.Column("acquisition_date", sa.Date, nullable=True),
        sa.Column("rental_date", sa.Date, nullable=True),
        sa.Column("transaction_date", sa.Date, nullable=True),
        sa.Column("vehicle_id", sa.Integer, sa.ForeignKey("vehicles.id"), nullable=True),
        sa.Column("load_id", sa.Integer, sa.ForeignKey("loads.id"), nullable=True),
        sa.Column("driver_id", sa.Integer, sa.ForeignKey("drivers.id"), nullable=True),
        sa.Column("company_id", sa.Integer, sa.ForeignKey("companies.id"), nullable=True),
        sa.Column("related_payment_id", sa.Integer, sa.ForeignKey("payments.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_payments_payment_type", "payments", ["payment_type"])
    op.create_index("ix_payments_load_id", "payments", ["load_id"])
    _installments("payment_installments", "payments", "payment_id")

    op.create_table(
        "bills",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("total_amount", sa.Integer, nullable=False, server_default="0"),
        sa.Column("paid_amount", sa.Integer, nullable=False, server_default="0"),
        sa.Column("status", sa.String(16), nullable=False, server_default="unpaid"),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("customer_id", sa.Integer, nullable=True),
        *_timestamps(),
    )
    _installments("bill_installments", "bills", "bill_id")

    op.create_table(
        "code_counters",
        sa.Column("family", sa.String(32), primary_key=True),
        sa.Column("value", sa.Integer, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("code_counters")
    op.drop_table("bill_installments")
    op.drop_table("bills")
    op.drop_table("payment_installments")
    op.drop_table("payments")
    op.drop_table("loads")
    op.drop_table("vehicles")
    op.drop_table("drivers")
    op.drop_table("companies")
