from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import date

from fleetdesk.models.bill import Bill
from fleetdesk.models.company import Company
from fleetdesk.models.driver import Driver
from fleetdesk.models.load import Load
from fleetdesk.models.payment import Payment
from fleetdesk.models.vehicle import Vehicle, VehicleStatus


class CompanyRepository(ABC):
    @abstractmethod
    def create(self, company: Company) -> Company: ...

    @abstractmethod
    def get_by_id(self, company_id: int) -> Company | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Company | None: ...

    @abstractmethod
    def get_by_name(self, name: str) -> Company | None: ...

    @abstractmethod
    def list_all(self) -> list[Company]: ...

    @abstractmethod
    def update(self, company: Company) -> Company: ...

    @abstractmethod
    def delete(self, company_id: int) -> None: ...

    @abstractmethod
    def purge(self, company_id: int) -> None: ...


class DriverRepository(ABC):
    @abstractmethod
    def create(self, driver: Driver) -> Driver: ...

    @abstractmethod
    def get_by_id(self, driver_id: int) -> Driver | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Driver | None: ...

    @abstractmethod
    def get_by_iqama_id(self, iqama_id: str, include_deleted: bool = False) -> Driver | None: ...

    @abstractmethod
    def list_all(self) -> list[Driver]: ...

    @abstractmethod
    def update(self, driver: Driver) -> Driver: ...

    @abstractmethod
    def delete(self, driver_id: int) -> None: ...

    @abstractmethod
    def purge(self, driver_id: int) -> None: ...


class VehicleRepository(ABC):
    @abstractmethod
    def create(self, vehicle: Vehicle) -> Vehicle: ...

    @abstractmethod
    def get_by_id(self, vehicle_id: int) -> Vehicle | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Vehicle | None: ...

    @abstractmethod
    def get_by_plate_no(self, plate_no: str, include_deleted: bool = False) -> Vehicle | None: ...

    @abstractmethod
    def list_all(self) -> list[Vehicle]: ...

    @abstractmethod
    def update(self, vehicle: Vehicle) -> Vehicle: ...

    @abstractmethod
    def update_status(self, vehicle_id: int, status: VehicleStatus) -> None: ...

    @abstractmethod
    def delete(self, vehicle_id: int) -> None: ...


class BillRepository(ABC):
    @abstractmethod
    def create(self, bill: Bill) -> Bill: ...

    @abstractmethod
    def get_by_id(self, bill_id: int) -> Bill | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Bill | None: ...

    @abstractmethod
    def list_all(self, bill_type: str | None = None, status: str | None = None) -> list[Bill]: ...

    @abstractmethod
    def update(self, bill: Bill) -> Bill: ...

    @abstractmethod
    def delete(self, bill_id: int) -> None: ...


class PaymentRepository(ABC):
    @abstractmethod
    def create(self, payment: Payment) -> Payment: ...

    @abstractmethod
    def get_by_id(self, payment_id: int) -> Payment | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Payment | None: ...

    @abstractmethod
    def list_all(self, payment_type: str | None = None, status: str | None = None) -> list[Payment]: ...

    @abstractmethod
    def list_by_load(self, load_id: int) -> list[Payment]: ...

    @abstractmethod
    def list_by_loads(self, load_ids: list[int]) -> list[Payment]: ...

    @abstractmethod
    def list_in_period(self, payment_type: str, date_field: str, start: date, end: date) -> list[Payment]: ...

    @abstractmethod
    def update(self, payment: Payment) -> Payment: ...

    @abstractmethod
    def link(self, payment_id: int, related_payment_id: int | None, load_id: int | None) -> None: ...

    @abstractmethod
    def delete(self, payment_id: int) -> None: ...

    @abstractmethod
    def purge(self, payment_id: int) -> None: ...


class LoadRepository(ABC):
    @abstractmethod
    def create(self, load: Load) -> Load: ...

    @abstractmethod
    def get_by_id(self, load_id: int) -> Load | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Load | None: ...

    @abstractmethod
    def get_by_rental_code(self, rental_code: str) -> Load | None: ...

    @abstractmethod
    def list_all(self, status: str | None = None) -> list[Load]: ...

    @abstractmethod
    def search(self, query: str) -> list[Load]: ...

    @abstractmethod
    def update(self, load: Load) -> Load: ...

    @abstractmethod
    def delete(self, load_id: int) -> None: ...

    @abstractmethod
    def purge(self, load_id: int) -> None: ...


class CodeCounterRepository(ABC):
    @abstractmethod
    def increment(self, family: str, seed: Callable[[], int]) -> int:
        """Atomically advance the family's counter and return the new value.

        ``seed`` is called only when the family has no counter row yet; its
        result becomes the first value handed out.
        """
        ...

    @abstractmethod
    def last_code(self, source: str, prefix: str) -> str | None:
        """Return the most recently inserted code starting with ``prefix``."""
        ...
