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


@pytest.fixture()
def company_repo(db_connection: Connection) -> SQLAlchemyCompanyRepository:
    return SQLAlchemyCompanyRepository(db_connection)


@pytest.fixture()
def driver_repo(db_connection: Connection) -> SQLAlchemyDriverRepository:
    return SQLAlchemyDriverRepository(db_connection)


@pytest.fixture()
def vehicle_repo(db_connection: Connection) -> SQLAlchemyVehicleRepository:
    return SQLAlchemyVehicleRepository(db_connection)


@pytest.fixture()
def bill_repo(db_connection: Connection) -> SQLAlchemyBillRepository:
    return SQLAlchemyBillRepository(db_connection)


@pytest.fixture()
def payment_repo(db_connection: Connection) -> SQLAlchemyPaymentRepository:
    return SQLAlchemyPaymentRepository(db_connection)


@pytest.fixture()
def load_repo(db_connection: Connection) -> SQLAlchemyLoadRepository:
    return SQLAlchemyLoadRepository(db_connection)


@pytest.fixture()
def counter_repo(db_connection: Connection) -> SQLAlchemyCodeCounterRepository:
    return SQLAlchemyCodeCounterRepository(db_connection)
