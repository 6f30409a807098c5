"""Services wired to real SQLAlchemy repositories on the in-memory database."""

import pytest
from sqlalchemy import Connection

from fleetdesk.repositories.sqlalchemy import (
    SQLAlchemyBillRepository,
    SQLAlchemyCodeCounterRepository,
    SQLAlchemyCompanyRepository,
    SQLAlchemyDriverRepository,
    SQLAlchemyLoadRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyVehicleRepository,
)
from fleetdesk.services.code_service import CodeGenerator
from fleetdesk.services.load_service import LoadService
from fleetdesk.services.payment_service import PaymentService
from fleetdesk.services.report_service import ReportService
from fleetdesk.services.transaction_service import TransactionService
from fleetdesk.services.vehicle_service import VehicleService


@pytest.fixture()
def codes(db_connection: Connection) -> CodeGenerator:
    return CodeGenerator(SQLAlchemyCodeCounterRepository(db_connection))


@pytest.fixture()
def repos(db_connection: Connection) -> dict:
    return {
        "company": SQLAlchemyCompanyRepository(db_connection),
        "driver": SQLAlchemyDriverRepository(db_connection),
        "vehicle": SQLAlchemyVehicleRepository(db_connection),
        "load": SQLAlchemyLoadRepository(db_connection),
        "payment": SQLAlchemyPaymentRepository(db_connection),
        "bill": SQLAlchemyBillRepository(db_connection),
    }


@pytest.fixture()
def payment_service(repos, codes) -> PaymentService:
    return PaymentService(repos["payment"], codes)


@pytest.fixture()
def transaction_service(repos, codes) -> TransactionService:
    return TransactionService(repos["company"], repos["driver"], repos["load"], repos["payment"], codes)


@pytest.fixture()
def load_service(repos, codes) -> LoadService:
    return LoadService(repos["load"], repos["payment"], repos["driver"], repos["vehicle"], repos["company"], codes)


@pytest.fixture()
def vehicle_service(repos, codes, payment_service) -> VehicleService:
    return VehicleService(repos["vehicle"], repos["company"], payment_service, codes)


@pytest.fixture()
def report_service(repos) -> ReportService:
    return ReportService(repos["load"], repos["payment"], repos["bill"], repos["company"], repos["driver"])


@pytest.fixture()
def rental_input():
    """Build a rental transaction body; keyword overrides replace top-level keys."""

    def _make(**overrides) -> dict:
        data = {
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
        data.update(overrides)
        return data

    return _make
