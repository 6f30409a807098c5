from fleetdesk.repositories.base import (
    BillRepository,
    CodeCounterRepository,
    CompanyRepository,
    DriverRepository,
    LoadRepository,
    PaymentRepository,
    VehicleRepository,
)


def get_company_repository() -> CompanyRepository:
    from fleetdesk.db import get_connection
    from fleetdesk.repositories.sqlalchemy import SQLAlchemyCompanyRepository

    return SQLAlchemyCompanyRepository(get_connection())


def get_driver_repository() -> DriverRepository:
    from fleetdesk.db import get_connection
    from fleetdesk.repositories.sqlalchemy import SQLAlchemyDriverRepository

    return SQLAlchemyDriverRepository(get_connection())


def get_vehicle_repository() -> VehicleRepository:
    from fleetdesk.db import get_connection
    from fleetdesk.repositories.sqlalchemy import SQLAlchemyVehicleRepository

    return SQLAlchemyVehicleRepository(get_connection())


def get_bill_repository() -> BillRepository:
    from fleetdesk.db import get_connection
    from fleetdesk.repositories.sqlalchemy import SQLAlchemyBillRepository

    return SQLAlchemyBillRepository(get_connection())


def get_payment_repository() -> PaymentRepository:
    from fleetdesk.db import get_connection
    from fleetdesk.repositories.sqlalchemy import SQLAlchemyPaymentRepository

    return SQLAlchemyPaymentRepository(get_connection())


def get_load_repository() -> LoadRepository:
    from fleetdesk.db import get_connection
    from fleetdesk.repositories.sqlalchemy import SQLAlchemyLoadRepository

    return SQLAlchemyLoadRepository(get_connection())


def get_code_counter_repository() -> CodeCounterRepository:
    from fleetdesk.db import get_connection
    from fleetdesk.repositories.sqlalchemy import SQLAlchemyCodeCounterRepository

    return SQLAlchemyCodeCounterRepository(get_connection())
