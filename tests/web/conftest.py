"""Web test fixtures — TestClient with shared in-memory SQLite."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.pool import StaticPool

from fleetdesk.models.company import Company
from fleetdesk.models.driver import Driver
from fleetdesk.repositories.sqlalchemy import SQLAlchemyCompanyRepository, SQLAlchemyDriverRepository
from tests.conftest import apply_schema


def _make_test_engine():
    """Create a fresh in-memory SQLite engine with shared connection pool."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    with engine.connect() as conn:
        apply_schema(conn)

    return engine


def create_company_in_db(engine, **overrides) -> Company:
    defaults = dict(company_code="COMP-001", name="Al Noor Logistics", phone_number="500000001")
    defaults.update(overrides)
    with engine.connect() as conn:
        return SQLAlchemyCompanyRepository(conn).create(Company(**defaults))


def create_driver_in_db(engine, **overrides) -> Driver:
    defaults = dict(driver_code="DRV-001", name="Faisal Khan", iqama_id="2400000001")
    defaults.update(overrides)
    with engine.connect() as conn:
        return SQLAlchemyDriverRepository(conn).create(Driver(**defaults))


RENTAL_BODY = {
    "company": {"kind": "new", "name": "Al Noor Logistics"},
    "driver": {"kind": "new", "name": "Faisal Khan", "iqama_id": "2400000001"},
    "vehicle_type": "Trailer",
    "plate_no": "ABC-1234",
    "acquisition_cost": 500000,
    "acquisition_date": "2026-03-01",
    "from_location": "Riyadh",
    "to_location": "Jeddah",
    "rental_amount": 300000,
    "rental_date": "2026-03-05",
}


@pytest.fixture(autouse=True)
def web_test_db(monkeypatch):
    """Set up in-memory DB and patch the web app to use it."""
    engine = _make_test_engine()

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_engine", lambda: engine)

    import web.app as app_module

    monkeypatch.setattr(app_module, "initialize_db", lambda: None)

    yield engine

    engine.dispose()


@pytest.fixture()
def test_engine(web_test_db):
    """Expose the test engine for helpers that need direct DB access."""
    return web_test_db


@pytest.fixture()
def client():
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)


@pytest.fixture()
def rental_transaction(client) -> dict:
    """Create a rental transaction through the API and return its summary."""
    response = client.post("/transactions/rental", json=RENTAL_BODY)
    assert response.status_code == 201
    return response.json()["data"]
