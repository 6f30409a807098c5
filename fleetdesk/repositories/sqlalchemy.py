from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError
from ulid import ULID

from fleetdesk.constants import LOCAL_TZ
from fleetdesk.models.bill import Bill, BillType
from fleetdesk.models.company import Company
from fleetdesk.models.driver import Driver, DriverStatus
from fleetdesk.models.ledger import Installment, LedgerStatus
from fleetdesk.models.load import Load, LoadStatus, RentalType
from fleetdesk.models.payment import PartyType, Payment, PaymentType
from fleetdesk.models.vehicle import AcquisitionType, Vehicle, VehicleStatus
from fleetdesk.repositories.base import (
    BillRepository,
    CodeCounterRepository,
    CompanyRepository,
    DriverRepository,
    LoadRepository,
    PaymentRepository,
    VehicleRepository,
)


def _now() -> datetime:
    return datetime.now(LOCAL_TZ)


def _in_clause(values: list[int], prefix: str = "id") -> tuple[str, dict[str, int]]:
    placeholders = ", ".join(f":{prefix}{i}" for i in range(len(values)))
    params = {f"{prefix}{i}": value for i, value in enumerate(values)}
    return placeholders, params


class _InstallmentTable:
    """Child rows of a ledger entry (bill_installments / payment_installments).

    Installments are rewritten as a whole on every update, keeping their uuids
    so that URLs referencing a single installment stay valid.
    """

    def __init__(self, conn: Connection, table: str, owner_column: str) -> None:
        self.conn = conn
        self.table = table
        self.owner_column = owner_column

    @staticmethod
    def _build(row: RowMapping) -> Installment:
        return Installment(
            id=row["id"],
            uuid=row["uuid"],
            amount=row["amount"],
            paid_date=row["paid_date"],
            notes=row["notes"],
            sort_order=row["sort_order"],
            created_at=row["created_at"],
        )

    def load(self, owner_id: int) -> list[Installment]:
        rows = (
            self.conn.execute(
                text(f"SELECT * FROM {self.table} WHERE {self.owner_column} = :owner_id ORDER BY sort_order"),
                {"owner_id": owner_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._build(row) for row in rows]

    def load_many(self, owner_ids: list[int]) -> dict[int, list[Installment]]:
        if not owner_ids:
            return {}
        placeholders, params = _in_clause(owner_ids)
        rows = (
            self.conn.execute(
                text(
                    f"SELECT * FROM {self.table} WHERE {self.owner_column} IN ({placeholders}) "
                    "ORDER BY sort_order"
                ),
                params,
            )
            .mappings()
            .fetchall()
        )
        by_owner: dict[int, list[Installment]] = {}
        for row in rows:
            by_owner.setdefault(row[self.owner_column], []).append(self._build(row))
        return by_owner

    def replace(self, owner_id: int, installments: list[Installment]) -> None:
        self.conn.execute(
            text(f"DELETE FROM {self.table} WHERE {self.owner_column} = :owner_id"),
            {"owner_id": owner_id},
        )
        for i, installment in enumerate(installments):
            self.conn.execute(
                text(
                    f"INSERT INTO {self.table} ({self.owner_column}, uuid, amount, paid_date, notes, "
                    "sort_order, created_at) "
                    "VALUES (:owner_id, :uuid, :amount, :paid_date, :notes, :sort_order, :created_at)"
                ),
                {
                    "owner_id": owner_id,
                    "uuid": installment.uuid or str(ULID()),
                    "amount": installment.amount,
                    "paid_date": installment.paid_date,
                    "notes": installment.notes,
                    "sort_order": i,
                    "created_at": installment.created_at or _now(),
                },
            )


class SQLAlchemyCompanyRepository(CompanyRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, company: Company) -> Company:
        now = _now()
        result = self.conn.execute(
            text(
                "INSERT INTO companies (uuid, company_code, name, contact, address, email, "
                "phone_country_code, phone_number, created_at, updated_at) "
                "VALUES (:uuid, :company_code, :name, :contact, :address, :email, "
                ":phone_country_code, :phone_number, :created_at, :updated_at)"
            ),
            {
                "uuid": str(ULID()),
                "company_code": company.company_code,
                "name": company.name,
                "contact": company.contact,
                "address": company.address,
                "email": company.email,
                "phone_country_code": company.phone_country_code,
                "phone_number": company.phone_number,
                "created_at": now,
                "updated_at": now,
            },
        )
        company_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(company_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve company after create (id={company_id})")
        return created

    @staticmethod
    def _build(row: RowMapping) -> Company:
        return Company(
            id=row["id"],
            uuid=row["uuid"],
            company_code=row["company_code"],
            name=row["name"],
            contact=row["contact"],
            address=row["address"],
            email=row["email"],
            phone_country_code=row["phone_country_code"],
            phone_number=row["phone_number"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted_at=row["deleted_at"],
        )

    def _fetch_one(self, where: str, params: dict) -> Company | None:
        row = (
            self.conn.execute(
                text(f"SELECT * FROM companies WHERE {where} AND deleted_at IS NULL"),
                params,
            )
            .mappings()
            .fetchone()
        )
        return self._build(row) if row else None

    def get_by_id(self, company_id: int) -> Company | None:
        return self._fetch_one("id = :id", {"id": company_id})

    def get_by_uuid(self, uuid: str) -> Company | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def get_by_name(self, name: str) -> Company | None:
        return self._fetch_one("name = :name", {"name": name})

    def list_all(self) -> list[Company]:
        rows = (
            self.conn.execute(text("SELECT * FROM companies WHERE deleted_at IS NULL ORDER BY name"))
            .mappings()
            .fetchall()
        )
        return [self._build(row) for row in rows]

    def update(self, company: Company) -> Company:
        if company.id is None:  # pragma: no cover
            raise ValueError("Cannot update company without an id")
        self.conn.execute(
            text(
                "UPDATE companies SET name = :name, contact = :contact, address = :address, "
                "email = :email, phone_country_code = :phone_country_code, "
                "phone_number = :phone_number, updated_at = :updated_at WHERE id = :id"
            ),
            {
                "name": company.name,
                "contact": company.contact,
                "address": company.address,
                "email": company.email,
                "phone_country_code": company.phone_country_code,
                "phone_number": company.phone_number,
                "updated_at": _now(),
                "id": company.id,
            },
        )
        self.conn.commit()
        result = self.get_by_id(company.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve company after update (id={company.id})")
        return result

    def delete(self, company_id: int) -> None:
        self.conn.execute(
            text("UPDATE companies SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": company_id},
        )
        self.conn.commit()

    def purge(self, company_id: int) -> None:
        self.conn.execute(text("DELETE FROM companies WHERE id = :id"), {"id": company_id})
        self.conn.commit()


class SQLAlchemyDriverRepository(DriverRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _params(driver: Driver) -> dict:
        return {
            "name": driver.name,
            "contact": driver.contact,
            "license_no": driver.license_no or None,
            "iqama_id": driver.iqama_id or None,
            "status": driver.status.value,
            "email": driver.email,
            "phone_country_code": driver.phone_country_code,
            "phone_number": driver.phone_number,
            "address": driver.address,
        }

    def create(self, driver: Driver) -> Driver:
        now = _now()
        params = self._params(driver)
        params.update(uuid=str(ULID()), driver_code=driver.driver_code, created_at=now, updated_at=now)
        result = self.conn.execute(
            text(
                "INSERT INTO drivers (uuid, driver_code, name, contact, license_no, iqama_id, status, "
                "email, phone_country_code, phone_number, address, created_at, updated_at) "
                "VALUES (:uuid, :driver_code, :name, :contact, :license_no, :iqama_id, :status, "
                ":email, :phone_country_code, :phone_number, :address, :created_at, :updated_at)"
            ),
            params,
        )
        driver_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(driver_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve driver after create (id={driver_id})")
        return created

    @staticmethod
    def _build(row: RowMapping) -> Driver:
        return Driver(
            id=row["id"],
            uuid=row["uuid"],
            driver_code=row["driver_code"],
            name=row["name"],
            contact=row["contact"],
            license_no=row["license_no"],
            iqama_id=row["iqama_id"],
            status=DriverStatus(row["status"]),
            email=row["email"],
            phone_country_code=row["phone_country_code"],
            phone_number=row["phone_number"],
            address=row["address"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted_at=row["deleted_at"],
        )

    def _fetch_one(self, where: str, params: dict, include_deleted: bool = False) -> Driver | None:
        if not include_deleted:
            where += " AND deleted_at IS NULL"
        row = (
            self.conn.execute(
                text(f"SELECT * FROM drivers WHERE {where}"),
                params,
            )
            .mappings()
            .fetchone()
        )
        return self._build(row) if row else None

    def get_by_id(self, driver_id: int) -> Driver | None:
        return self._fetch_one("id = :id", {"id": driver_id})

    def get_by_uuid(self, uuid: str) -> Driver | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def get_by_iqama_id(self, iqama_id: str, include_deleted: bool = False) -> Driver | None:
        return self._fetch_one("iqama_id = :iqama_id", {"iqama_id": iqama_id}, include_deleted)

    def list_all(self) -> list[Driver]:
        rows = (
            self.conn.execute(text("SELECT * FROM drivers WHERE deleted_at IS NULL ORDER BY name"))
            .mappings()
            .fetchall()
        )
        return [self._build(row) for row in rows]

    def update(self, driver: Driver) -> Driver:
        if driver.id is None:  # pragma: no cover
            raise ValueError("Cannot update driver without an id")
        params = self._params(driver)
        params.update(updated_at=_now(), id=driver.id)
        self.conn.execute(
            text(
                "UPDATE drivers SET name = :name, contact = :contact, license_no = :license_no, "
                "iqama_id = :iqama_id, status = :status, email = :email, "
                "phone_country_code = :phone_country_code, phone_number = :phone_number, "
                "address = :address, updated_at = :updated_at WHERE id = :id"
            ),
            params,
        )
        self.conn.commit()
        result = self.get_by_id(driver.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve driver after update (id={driver.id})")
        return result

    def delete(self, driver_id: int) -> None:
        self.conn.execute(
            text("UPDATE drivers SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": driver_id},
        )
        self.conn.commit()

    def purge(self, driver_id: int) -> None:
        self.conn.execute(text("DELETE FROM drivers WHERE id = :id"), {"id": driver_id})
        self.conn.commit()


class SQLAlchemyVehicleRepository(VehicleRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _params(vehicle: Vehicle) -> dict:
        return {
            "company_id": vehicle.company_id,
            "vehicle_type": vehicle.vehicle_type,
            "plate_no": vehicle.plate_no,
            "status": vehicle.status.value,
            "manufacturer": vehicle.manufacturer,
            "year": vehicle.year,
            "capacity": vehicle.capacity,
            "acquisition_cost": vehicle.acquisition_cost,
            "acquisition_type": vehicle.acquisition_type.value,
            "acquisition_date": vehicle.acquisition_date,
        }

    def create(self, vehicle: Vehicle) -> Vehicle:
        now = _now()
        params = self._params(vehicle)
        params.update(uuid=str(ULID()), vehicle_code=vehicle.vehicle_code, created_at=now, updated_at=now)
        result = self.conn.execute(
            text(
                "INSERT INTO vehicles (uuid, vehicle_code, company_id, vehicle_type, plate_no, status, "
                "manufacturer, year, capacity, acquisition_cost, acquisition_type, acquisition_date, "
                "created_at, updated_at) "
                "VALUES (:uuid, :vehicle_code, :company_id, :vehicle_type, :plate_no, :status, "
                ":manufacturer, :year, :capacity, :acquisition_cost, :acquisition_type, :acquisition_date, "
                ":created_at, :updated_at)"
            ),
            params,
        )
        vehicle_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(vehicle_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve vehicle after create (id={vehicle_id})")
        return created

    @staticmethod
    def _build(row: RowMapping) -> Vehicle:
        return Vehicle(
            id=row["id"],
            uuid=row["uuid"],
            vehicle_code=row["vehicle_code"],
            company_id=row["company_id"],
            vehicle_type=row["vehicle_type"],
            plate_no=row["plate_no"],
            status=VehicleStatus(row["status"]),
            manufacturer=row["manufacturer"],
            year=row["year"],
            capacity=row["capacity"],
            acquisition_cost=row["acquisition_cost"],
            acquisition_type=AcquisitionType(row["acquisition_type"]),
            acquisition_date=row["acquisition_date"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted_at=row["deleted_at"],
        )

    def _fetch_one(self, where: str, params: dict, include_deleted: bool = False) -> Vehicle | None:
        if not include_deleted:
            where += " AND deleted_at IS NULL"
        row = (
            self.conn.execute(
                text(f"SELECT * FROM vehicles WHERE {where}"),
                params,
            )
            .mappings()
            .fetchone()
        )
        return self._build(row) if row else None

    def get_by_id(self, vehicle_id: int) -> Vehicle | None:
        return self._fetch_one("id = :id", {"id": vehicle_id})

    def get_by_uuid(self, uuid: str) -> Vehicle | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def get_by_plate_no(self, plate_no: str, include_deleted: bool = False) -> Vehicle | None:
        return self._fetch_one("plate_no = :plate_no", {"plate_no": plate_no}, include_deleted)

    def list_all(self) -> list[Vehicle]:
        rows = (
            self.conn.execute(text("SELECT * FROM vehicles WHERE deleted_at IS NULL ORDER BY created_at DESC"))
            .mappings()
            .fetchall()
        )
        return [self._build(row) for row in rows]

    def update(self, vehicle: Vehicle) -> Vehicle:
        if vehicle.id is None:  # pragma: no cover
            raise ValueError("Cannot update vehicle without an id")
        params = self._params(vehicle)
        params.update(updated_at=_now(), id=vehicle.id)
        self.conn.execute(
            text(
                "UPDATE vehicles SET company_id = :company_id, vehicle_type = :vehicle_type, "
                "plate_no = :plate_no, status = :status, manufacturer = :manufacturer, year = :year, "
                "capacity = :capacity, acquisition_cost = :acquisition_cost, "
                "acquisition_type = :acquisition_type, acquisition_date = :acquisition_date, "
                "updated_at = :updated_at WHERE id = :id"
            ),
            params,
        )
        self.conn.commit()
        result = self.get_by_id(vehicle.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve vehicle after update (id={vehicle.id})")
        return result

    def update_status(self, vehicle_id: int, status: VehicleStatus) -> None:
        self.conn.execute(
            text("UPDATE vehicles SET status = :status, updated_at = :updated_at WHERE id = :id"),
            {"status": status.value, "updated_at": _now(), "id": vehicle_id},
        )
        self.conn.commit()

    def delete(self, vehicle_id: int) -> None:
        self.conn.execute(
            text("UPDATE vehicles SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": vehicle_id},
        )
        self.conn.commit()


class SQLAlchemyBillRepository(BillRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn
        self.installments = _InstallmentTable(conn, "bill_installments", "bill_id")

    @staticmethod
    def _params(bill: Bill) -> dict:
        return {
            "type": bill.type.value,
            "name": bill.name,
            "total_amount": bill.total_amount,
            "paid_amount": bill.paid_amount,
            "status": bill.status.value,
            "date": bill.date,
            "customer_id": bill.customer_id,
        }

    def create(self, bill: Bill) -> Bill:
        now = _now()
        params = self._params(bill)
        params.update(uuid=str(ULID()), created_at=now, updated_at=now)
        result = self.conn.execute(
            text(
                "INSERT INTO bills (uuid, type, name, total_amount, paid_amount, status, date, "
                "customer_id, created_at, updated_at) "
                "VALUES (:uuid, :type, :name, :total_amount, :paid_amount, :status, :date, "
                ":customer_id, :created_at, :updated_at)"
            ),
            params,
        )
        bill_id = result.lastrowid
        self.installments.replace(bill_id, bill.installments)
        self.conn.commit()
        created = self.get_by_id(bill_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve bill after create (id={bill_id})")
        return created

    @staticmethod
    def _build(row: RowMapping, installments: list[Installment]) -> Bill:
        return Bill(
            id=row["id"],
            uuid=row["uuid"],
            type=BillType(row["type"]),
            name=row["name"],
            total_amount=row["total_amount"],
            paid_amount=row["paid_amount"],
            status=LedgerStatus(row["status"]),
            installments=installments,
            date=row["date"],
            customer_id=row["customer_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted_at=row["deleted_at"],
        )

    def _fetch_one(self, where: str, params: dict) -> Bill | None:
        row = (
            self.conn.execute(
                text(f"SELECT * FROM bills WHERE {where} AND deleted_at IS NULL"),
                params,
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build(row, self.installments.load(row["id"]))

    def get_by_id(self, bill_id: int) -> Bill | None:
        return self._fetch_one("id = :id", {"id": bill_id})

    def get_by_uuid(self, uuid: str) -> Bill | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def list_all(self, bill_type: str | None = None, status: str | None = None) -> list[Bill]:
        clauses = ["deleted_at IS NULL"]
        params: dict[str, str] = {}
        if bill_type:
            clauses.append("type = :type")
            params["type"] = bill_type
        if status:
            clauses.append("status = :status")
            params["status"] = status
        rows = (
            self.conn.execute(
                text(f"SELECT * FROM bills WHERE {' AND '.join(clauses)} ORDER BY date DESC, id DESC"),
                params,
            )
            .mappings()
            .fetchall()
        )
        by_bill = self.installments.load_many([row["id"] for row in rows])
        return [self._build(row, by_bill.get(row["id"], [])) for row in rows]

    def update(self, bill: Bill) -> Bill:
        if bill.id is None:  # pragma: no cover
            raise ValueError("Cannot update bill without an id")
        params = self._params(bill)
        params.update(updated_at=_now(), id=bill.id)
        self.conn.execute(
            text(
                "UPDATE bills SET type = :type, name = :name, total_amount = :total_amount, "
                "paid_amount = :paid_amount, status = :status, date = :date, "
                "customer_id = :customer_id, updated_at = :updated_at WHERE id = :id"
            ),
            params,
        )
        self.installments.replace(bill.id, bill.installments)
        self.conn.commit()
        result = self.get_by_id(bill.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve bill after update (id={bill.id})")
        return result

    def delete(self, bill_id: int) -> None:
        self.conn.execute(
            text("UPDATE bills SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": bill_id},
        )
        self.conn.commit()


class SQLAlchemyPaymentRepository(PaymentRepository):
    DATE_FIELDS = {"acquisition_date", "rental_date", "transaction_date"}

    def __init__(self, conn: Connection) -> None:
        self.conn = conn
        self.installments = _InstallmentTable(conn, "payment_installments", "payment_id")

    @staticmethod
    def _params(payment: Payment) -> dict:
        return {
            "receipt_code": payment.receipt_code,
            "payment_type": payment.payment_type.value,
            "payer": payment.payer,
            "payer_type": payment.payer_type.value if payment.payer_type else None,
            "payer_id": payment.payer_id,
            "payee": payment.payee,
            "payee_type": payment.payee_type.value if payment.payee_type else None,
            "payee_id": payment.payee_id,
            "total_amount": payment.total_amount,
            "total_paid": payment.total_paid,
            "total_due": payment.total_due,
            "status": payment.status.value,
            "description": payment.description,
            "vehicle_type": payment.vehicle_type,
            "plate_no": payment.plate_no,
            "from_location": payment.from_location,
            "to_location": payment.to_location,
            "acquisition_date": payment.acquisition_date,
            "rental_date": payment.rental_date,
            "transaction_date": payment.transaction_date,
            "vehicle_id": payment.vehicle_id,
            "load_id": payment.load_id,
            "driver_id": payment.driver_id,
            "company_id": payment.company_id,
            "related_payment_id": payment.related_payment_id,
        }

    def create(self, payment: Payment) -> Payment:
        now = _now()
        params = self._params(payment)
        params.update(uuid=str(ULID()), created_at=now, updated_at=now)
        columns = ", ".join(params)
        values = ", ".join(f":{key}" for key in params)
        result = self.conn.execute(text(f"INSERT INTO payments ({columns}) VALUES ({values})"), params)
        payment_id = result.lastrowid
        self.installments.replace(payment_id, payment.installments)
        self.conn.commit()
        created = self.get_by_id(payment_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve payment after create (id={payment_id})")
        return created

    @staticmethod
    def _build(row: RowMapping, installments: list[Installment]) -> Payment:
        return Payment(
            id=row["id"],
            uuid=row["uuid"],
            receipt_code=row["receipt_code"],
            payment_type=PaymentType(row["payment_type"]),
            payer=row["payer"],
            payer_type=PartyType(row["payer_type"]) if row["payer_type"] else None,
            payer_id=row["payer_id"],
            payee=row["payee"],
            payee_type=PartyType(row["payee_type"]) if row["payee_type"] else None,
            payee_id=row["payee_id"],
            total_amount=row["total_amount"],
            total_paid=row["total_paid"],
            total_due=row["total_due"],
            status=LedgerStatus(row["status"]),
            installments=installments,
            description=row["description"],
            vehicle_type=row["vehicle_type"],
            plate_no=row["plate_no"],
            from_location=row["from_location"],
            to_location=row["to_location"],
            acquisition_date=row["acquisition_date"],
            rental_date=row["rental_date"],
            transaction_date=row["transaction_date"],
            vehicle_id=row["vehicle_id"],
            load_id=row["load_id"],
            driver_id=row["driver_id"],
            company_id=row["company_id"],
            related_payment_id=row["related_payment_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted_at=row["deleted_at"],
        )

    def _fetch_many(self, where: str, params: dict, order: str = "created_at DESC, id DESC") -> list[Payment]:
        rows = (
            self.conn.execute(
                text(f"SELECT * FROM payments WHERE {where} AND deleted_at IS NULL ORDER BY {order}"),
                params,
            )
            .mappings()
            .fetchall()
        )
        by_payment = self.installments.load_many([row["id"] for row in rows])
        return [self._build(row, by_payment.get(row["id"], [])) for row in rows]

    def _fetch_one(self, where: str, params: dict) -> Payment | None:
        row = (
            self.conn.execute(
                text(f"SELECT * FROM payments WHERE {where} AND deleted_at IS NULL"),
                params,
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build(row, self.installments.load(row["id"]))

    def get_by_id(self, payment_id: int) -> Payment | None:
        return self._fetch_one("id = :id", {"id": payment_id})

    def get_by_uuid(self, uuid: str) -> Payment | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def list_all(self, payment_type: str | None = None, status: str | None = None) -> list[Payment]:
        clauses = ["1 = 1"]
        params: dict[str, str] = {}
        if payment_type:
            clauses.append("payment_type = :payment_type")
            params["payment_type"] = payment_type
        if status:
            clauses.append("status = :status")
            params["status"] = status
        return self._fetch_many(" AND ".join(clauses), params)

    def list_by_load(self, load_id: int) -> list[Payment]:
        return self._fetch_many("load_id = :load_id", {"load_id": load_id}, order="id")

    def list_by_loads(self, load_ids: list[int]) -> list[Payment]:
        if not load_ids:
            return []
        placeholders, params = _in_clause(load_ids, prefix="load")
        return self._fetch_many(f"load_id IN ({placeholders})", params, order="id")

    def list_in_period(self, payment_type: str, date_field: str, start: date, end: date) -> list[Payment]:
        if date_field not in self.DATE_FIELDS:
            raise ValueError(f"Unsupported payment date field: {date_field}")
        return self._fetch_many(
            f"payment_type = :payment_type AND {date_field} >= :start AND {date_field} < :end",
            {"payment_type": payment_type, "start": start, "end": end},
            order=f"{date_field}, id",
        )

    def update(self, payment: Payment) -> Payment:
        if payment.id is None:  # pragma: no cover
            raise ValueError("Cannot update payment without an id")
        params = self._params(payment)
        assignments = ", ".join(f"{key} = :{key}" for key in params)
        params.update(updated_at=_now(), id=payment.id)
        self.conn.execute(
            text(f"UPDATE payments SET {assignments}, updated_at = :updated_at WHERE id = :id"),
            params,
        )
        self.installments.replace(payment.id, payment.installments)
        self.conn.commit()
        result = self.get_by_id(payment.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve payment after update (id={payment.id})")
        return result

    def link(self, payment_id: int, related_payment_id: int | None, load_id: int | None) -> None:
        self.conn.execute(
            text(
                "UPDATE payments SET related_payment_id = :related_payment_id, load_id = :load_id, "
                "updated_at = :updated_at WHERE id = :id"
            ),
            {
                "related_payment_id": related_payment_id,
                "load_id": load_id,
                "updated_at": _now(),
                "id": payment_id,
            },
        )
        self.conn.commit()

    def delete(self, payment_id: int) -> None:
        self.conn.execute(
            text("UPDATE payments SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": payment_id},
        )
        self.conn.commit()

    def purge(self, payment_id: int) -> None:
        self.conn.execute(text("DELETE FROM payment_installments WHERE payment_id = :id"), {"id": payment_id})
        self.conn.execute(text("DELETE FROM payments WHERE id = :id"), {"id": payment_id})
        self.conn.commit()


class SQLAlchemyLoadRepository(LoadRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _params(load: Load) -> dict:
        return {
            "vehicle_id": load.vehicle_id,
            "vehicle_type": load.vehicle_type,
            "plate_no": load.plate_no,
            "company_id": load.company_id,
            "driver_id": load.driver_id,
            "from_location": load.from_location,
            "to_location": load.to_location,
            "description": load.description,
            "rental_type": load.rental_type.value,
            "rental_price_per_day": load.rental_price_per_day,
            "distance_km": load.distance_km,
            "start_date": load.start_date,
            "end_date": load.end_date,
            "days_rented": load.days_rented,
            "rental_amount": load.rental_amount,
            "rental_date": load.rental_date,
            "status": load.status.value,
        }

    def create(self, load: Load) -> Load:
        now = _now()
        params = self._params(load)
        params.update(uuid=str(ULID()), rental_code=load.rental_code, created_at=now, updated_at=now)
        columns = ", ".join(params)
        values = ", ".join(f":{key}" for key in params)
        result = self.conn.execute(text(f"INSERT INTO loads ({columns}) VALUES ({values})"), params)
        load_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(load_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve load after create (id={load_id})")
        return created

    @staticmethod
    def _build(row: RowMapping) -> Load:
        return Load(
            id=row["id"],
            uuid=row["uuid"],
            rental_code=row["rental_code"],
            vehicle_id=row["vehicle_id"],
            vehicle_type=row["vehicle_type"],
            plate_no=row["plate_no"],
            company_id=row["company_id"],
            driver_id=row["driver_id"],
            from_location=row["from_location"],
            to_location=row["to_location"],
            description=row["description"],
            rental_type=RentalType(row["rental_type"]),
            rental_price_per_day=row["rental_price_per_day"],
            distance_km=row["distance_km"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            days_rented=row["days_rented"],
            rental_amount=row["rental_amount"],
            rental_date=row["rental_date"],
            status=LoadStatus(row["status"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted_at=row["deleted_at"],
        )

    def _fetch_one(self, where: str, params: dict) -> Load | None:
        row = (
            self.conn.execute(
                text(f"SELECT * FROM loads WHERE {where} AND deleted_at IS NULL"),
                params,
            )
            .mappings()
            .fetchone()
        )
        return self._build(row) if row else None

    def get_by_id(self, load_id: int) -> Load | None:
        return self._fetch_one("id = :id", {"id": load_id})

    def get_by_uuid(self, uuid: str) -> Load | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def get_by_rental_code(self, rental_code: str) -> Load | None:
        return self._fetch_one("rental_code = :rental_code", {"rental_code": rental_code})

    def list_all(self, status: str | None = None) -> list[Load]:
        where = "deleted_at IS NULL"
        params: dict[str, str] = {}
        if status:
            where += " AND status = :status"
            params["status"] = status
        rows = (
            self.conn.execute(text(f"SELECT * FROM loads WHERE {where} ORDER BY created_at DESC, id DESC"), params)
            .mappings()
            .fetchall()
        )
        return [self._build(row) for row in rows]

    def search(self, query: str) -> list[Load]:
        pattern = f"%{query.lower()}%"
        rows = (
            self.conn.execute(
                text(
                    "SELECT * FROM loads WHERE deleted_at IS NULL AND "
                    "(LOWER(rental_code) LIKE :pattern OR LOWER(vehicle_type) LIKE :pattern) "
                    "ORDER BY created_at DESC, id DESC"
                ),
                {"pattern": pattern},
            )
            .mappings()
            .fetchall()
        )
        return [self._build(row) for row in rows]

    def update(self, load: Load) -> Load:
        if load.id is None:  # pragma: no cover
            raise ValueError("Cannot update load without an id")
        params = self._params(load)
        assignments = ", ".join(f"{key} = :{key}" for key in params)
        params.update(updated_at=_now(), id=load.id)
        self.conn.execute(
            text(f"UPDATE loads SET {assignments}, updated_at = :updated_at WHERE id = :id"),
            params,
        )
        self.conn.commit()
        result = self.get_by_id(load.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve load after update (id={load.id})")
        return result

    def delete(self, load_id: int) -> None:
        self.conn.execute(
            text("UPDATE loads SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": load_id},
        )
        self.conn.commit()

    def purge(self, load_id: int) -> None:
        self.conn.execute(text("DELETE FROM loads WHERE id = :id"), {"id": load_id})
        self.conn.commit()


class SQLAlchemyCodeCounterRepository(CodeCounterRepository):
    # source -> (table, code column); soft-deleted rows still own their codes
    SOURCES = {
        "company": ("companies", "company_code"),
        "driver": ("drivers", "driver_code"),
        "vehicle": ("vehicles", "vehicle_code"),
        "rental": ("loads", "rental_code"),
        "receipt": ("payments", "receipt_code"),
    }

    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def increment(self, family: str, seed: Callable[[], int]) -> int:
        result = self.conn.execute(
            text("UPDATE code_counters SET value = value + 1 WHERE family = :family"),
            {"family": family},
        )
        if result.rowcount == 0:
            start = seed()
            try:
                self.conn.execute(
                    text("INSERT INTO code_counters (family, value) VALUES (:family, :value)"),
                    {"family": family, "value": start},
                )
                self.conn.commit()
                return start
            except IntegrityError:
                # another request seeded the family first
                self.conn.rollback()
                return self.increment(family, seed)
        value = self.conn.execute(
            text("SELECT value FROM code_counters WHERE family = :family"),
            {"family": family},
        ).scalar_one()
        self.conn.commit()
        return value

    def last_code(self, source: str, prefix: str) -> str | None:
        if source not in self.SOURCES:
            raise ValueError(f"Unknown code source: {source}")
        table, column = self.SOURCES[source]
        row = self.conn.execute(
            text(f"SELECT {column} FROM {table} WHERE {column} LIKE :prefix ORDER BY id DESC LIMIT 1"),
            {"prefix": f"{prefix}%"},
        ).fetchone()
        return row[0] if row else None
