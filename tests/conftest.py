"""Root conftest — in-memory SQLite engine and fixtures for the full schema."""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from fleetdesk.models.bill import Bill, BillType
from fleetdesk.models.company import Company
from fleetdesk.models.driver import Driver
from fleetdesk.models.load import Load
from fleetdesk.models.payment import PartyType, Payment, PaymentType

# Matches Alembic head: 3f9c1a7d2b4e (initial schema)
SCHEMA_DDL = """
CREATE TABLE companies (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    company_code VARCHAR(32) NOT NULL UNIQUE,
    name VARCHAR(255) NOT NULL,
    contact VARCHAR(255) NOT NULL DEFAULT '',
    address TEXT NOT NULL DEFAULT '',
    email VARCHAR(255) NOT NULL DEFAULT '',
    phone_country_code VARCHAR(8) NOT NULL DEFAULT '+91',
    phone_number VARCHAR(32) NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    deleted_at DATETIME
);

CREATE TABLE drivers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    driver_code VARCHAR(32) NOT NULL UNIQUE,
    name VARCHAR(255) NOT NULL,
    contact VARCHAR(255) NOT NULL DEFAULT '',
    license_no VARCHAR(64),
    iqama_id VARCHAR(64) UNIQUE,
    status VARCHAR(16) NOT NULL DEFAULT 'active',
    email VARCHAR(255) NOT NULL DEFAULT '',
    phone_country_code VARCHAR(8) NOT NULL DEFAULT '+966',
    phone_number VARCHAR(32) NOT NULL DEFAULT '',
    address TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    deleted_at DATETIME
);

CREATE TABLE vehicles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    vehicle_code VARCHAR(32) NOT NULL UNIQUE,
    company_id INTEGER NOT NULL REFERENCES companies(id),
    vehicle_type VARCHAR(100) NOT NULL,
    plate_no VARCHAR(32) NOT NULL UNIQUE,
    status VARCHAR(16) NOT NULL DEFAULT 'available',
    manufacturer VARCHAR(100) NOT NULL DEFAULT '',
    year INTEGER,
    capacity INTEGER,
    acquisition_cost INTEGER NOT NULL DEFAULT 0,
    acquisition_type VARCHAR(16) NOT NULL DEFAULT 'bought',
    acquisition_date DATE,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    deleted_at DATETIME
);

CREATE TABLE loads (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    rental_code VARCHAR(32) NOT NULL UNIQUE,
    vehicle_id INTEGER REFERENCES vehicles(id),
    vehicle_type VARCHAR(100) NOT NULL,
    plate_no VARCHAR(32) NOT NULL DEFAULT '',
    company_id INTEGER REFERENCES companies(id),
    driver_id INTEGER REFERENCES drivers(id),
    from_location VARCHAR(255) NOT NULL,
    to_location VARCHAR(255) NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    rental_type VARCHAR(16) NOT NULL DEFAULT 'per_day',
    rental_price_per_day INTEGER NOT NULL DEFAULT 0,
    distance_km FLOAT,
    start_date DATE,
    end_date DATE,
    days_rented INTEGER NOT NULL DEFAULT 0,
    rental_amount INTEGER NOT NULL DEFAULT 0,
    rental_date DATE,
    status VARCHAR(16) NOT NULL DEFAULT 'pending',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    deleted_at DATETIME
);

CREATE TABLE payments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    receipt_code VARCHAR(32) NOT NULL UNIQUE,
    payment_type VARCHAR(32) NOT NULL,
    payer VARCHAR(255) NOT NULL,
    payer_type VARCHAR(16),
    payer_id INTEGER,
    payee VARCHAR(255) NOT NULL DEFAULT '',
    payee_type VARCHAR(16),
    payee_id INTEGER,
    total_amount INTEGER NOT NULL DEFAULT 0,
    total_paid INTEGER NOT NULL DEFAULT 0,
    total_due INTEGER NOT NULL DEFAULT 0,
    status VARCHAR(16) NOT NULL DEFAULT 'unpaid',
    description TEXT NOT NULL DEFAULT '',
    vehicle_type VARCHAR(100) NOT NULL DEFAULT '',
    plate_no VARCHAR(32) NOT NULL DEFAULT '',
    from_location VARCHAR(255) NOT NULL DEFAULT '',
    to_location VARCHAR(255) NOT NULL DEFAULT '',
    acquisition_date DATE,
    rental_date DATE,
    transaction_date DATE,
    vehicle_id INTEGER REFERENCES vehicles(id),
    load_id INTEGER REFERENCES loads(id),
    driver_id INTEGER REFERENCES drivers(id),
    company_id INTEGER REFERENCES companies(id),
    related_payment_id INTEGER REFERENCES payments(id),
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    deleted_at DATETIME
);

CREATE TABLE payment_installments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    payment_id INTEGER NOT NULL REFERENCES payments(id) ON DELETE CASCADE,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    amount INTEGER NOT NULL,
    paid_date DATE NOT NULL,
    notes TEXT NOT NULL DEFAULT '',
    sort_order INTEGER NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL
);

CREATE TABLE bills (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    type VARCHAR(16) NOT NULL,
    name VARCHAR(255) NOT NULL,
    total_amount INTEGER NOT NULL DEFAULT 0,
    paid_amount INTEGER NOT NULL DEFAULT 0,
    status VARCHAR(16) NOT NULL DEFAULT 'unpaid',
    date DATE NOT NULL,
    customer_id INTEGER,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    deleted_at DATETIME
);

CREATE TABLE bill_installments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    bill_id INTEGER NOT NULL REFERENCES bills(id) ON DELETE CASCADE,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    amount INTEGER NOT NULL,
    paid_date DATE NOT NULL,
    notes TEXT NOT NULL DEFAULT '',
    sort_order INTEGER NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL
);

CREATE TABLE code_counters (
    family VARCHAR(32) PRIMARY KEY,
    value INTEGER NOT NULL
);
"""


def apply_schema(conn: Connection) -> None:
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_engine("sqlite:///:memory:")

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    return engine


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    apply_schema(conn)
    yield conn
    conn.close()


def _sample_company(**overrides) -> Company:
    defaults = dict(company_code="COMP-001", name="Al Noor Logistics", contact="Sami", phone_number="500000001")
    defaults.update(overrides)
    return Company(**defaults)


def _sample_driver(**overrides) -> Driver:
    defaults = dict(driver_code="DRV-001", name="Faisal Khan", iqama_id="2400000001", license_no="L-77")
    defaults.update(overrides)
    return Driver(**defaults)


def _sample_bill(**overrides) -> Bill:
    defaults = dict(type=BillType.EXPENSE, name="Diesel", total_amount=100000, date=date(2026, 3, 1))
    defaults.update(overrides)
    return Bill(**defaults)


def _sample_payment(**overrides) -> Payment:
    defaults = dict(
        receipt_code="ESSA1001",
        payment_type=PaymentType.DRIVER_RENTAL,
        payer="Faisal Khan",
        payer_type=PartyType.DRIVER,
        payee="Al Noor Logistics",
        payee_type=PartyType.COMPANY,
        total_amount=30000,
        total_due=30000,
        vehicle_type="Trailer",
        plate_no="ABC-1234",
        from_location="Riyadh",
        to_location="Jeddah",
        rental_date=date(2026, 3, 10),
        transaction_date=date(2026, 3, 10),
    )
    defaults.update(overrides)
    return Payment(**defaults)


def _sample_load(**overrides) -> Load:
    defaults = dict(
        rental_code="RNT-2026-001",
        vehicle_type="Trailer",
        plate_no="ABC-1234",
        from_location="Riyadh",
        to_location="Jeddah",
        rental_amount=30000,
        rental_date=date(2026, 3, 10),
    )
    defaults.update(overrides)
    return Load(**defaults)


@pytest.fixture()
def sample_company():
    return _sample_company


@pytest.fixture()
def sample_driver():
    return _sample_driver


@pytest.fixture()
def sample_bill():
    return _sample_bill


@pytest.fixture()
def sample_payment():
    return _sample_payment


@pytest.fixture()
def sample_load():
    return _sample_load
