"""Rental transaction: company + driver + load + two linked payments.

The writes run as a saga. Each committed step registers a compensating
action; when a later step fails the compensations run newest first and the
original error is re-raised. Companies and drivers that already existed are
never compensated.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from fleetdesk.constants import LOCAL_TZ
from fleetdesk.errors import FleetDeskError, NotFoundError, ValidationError
from fleetdesk.models.company import Company
from fleetdesk.models.driver import Driver
from fleetdesk.models.load import Load, LoadStatus
from fleetdesk.models.payment import PartyType, Payment, PaymentType
from fleetdesk.models.transaction import (
    BulkResult,
    BulkRowError,
    CompanySummary,
    DriverSummary,
    ExistingRef,
    LoadSummary,
    PaymentsSummary,
    RentalTransactionDetail,
    RentalTransactionInput,
    RentalTransactionSummary,
    RentalTransactionUpdate,
)
from fleetdesk.repositories.base import (
    CompanyRepository,
    DriverRepository,
    LoadRepository,
    PaymentRepository,
)
from fleetdesk.services import ledger
from fleetdesk.services.code_service import CodeGenerator
from fleetdesk.services.company_service import CompanyService
from fleetdesk.services.driver_service import DriverService
from fleetdesk.settings import settings

logger = logging.getLogger(__name__)


class Saga:
    def __init__(self, name: str) -> None:
        self.name = name
        self._compensations: list[tuple[str, Callable[[], None]]] = []

    def on_failure(self, description: str, action: Callable[[], None]) -> None:
        self._compensations.append((description, action))

    def compensate(self) -> None:
        for description, action in reversed(self._compensations):
            try:
                action()
                logger.info("%s: compensated (%s)", self.name, description)
            except Exception:
                logger.exception("%s: compensation failed (%s)", self.name, description)
        self._compensations.clear()


def pydantic_errors(exc: PydanticValidationError) -> list[str]:
    return [f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in exc.errors()]


class TransactionService:
    def __init__(
        self,
        company_repo: CompanyRepository,
        driver_repo: DriverRepository,
        load_repo: LoadRepository,
        payment_repo: PaymentRepository,
        codes: CodeGenerator,
    ) -> None:
        self.company_repo = company_repo
        self.driver_repo = driver_repo
        self.load_repo = load_repo
        self.payment_repo = payment_repo
        self.codes = codes
        self.companies = CompanyService(company_repo, codes)
        self.drivers = DriverService(driver_repo, codes)

    # -- create ------------------------------------------------------------

    @staticmethod
    def _validate(data: RentalTransactionInput) -> Load:
        errors = []
        if data.company is None:
            errors.append("company: either an existing company id or a company name is required")
        elif not isinstance(data.company, ExistingRef) and not data.company.name.strip():
            errors.append("company.name: field required")
        if data.driver is None:
            errors.append("driver: either an existing driver id or a driver name and iqama id is required")
        elif not isinstance(data.driver, ExistingRef):
            if not data.driver.name.strip():
                errors.append("driver.name: field required")
            if not data.driver.iqama_id.strip():
                errors.append("driver.iqama_id: field required")
        for field in ("vehicle_type", "from_location", "to_location"):
            if not getattr(data, field).strip():
                errors.append(f"{field}: field required")
        if data.acquisition_cost <= 0:
            errors.append("acquisition_cost: must be greater than zero")

        load = Load(
            vehicle_type=data.vehicle_type.strip(),
            plate_no=data.plate_no.strip(),
            from_location=data.from_location.strip(),
            to_location=data.to_location.strip(),
            description=data.description,
            rental_type=data.rental_type,
            rental_price_per_day=data.rental_price_per_day,
            distance_km=data.distance_km,
            start_date=data.start_date,
            end_date=data.end_date,
            rental_amount=data.rental_amount,
            rental_date=data.rental_date or datetime.now(LOCAL_TZ).date(),
        )
        load.reprice()
        if load.rental_amount <= 0:
            errors.append("rental_amount: provide rental_amount or complete pricing fields")
        if errors:
            raise ValidationError("Missing or invalid rental transaction fields", errors)
        return load

    def _resolve_company(self, data: RentalTransactionInput, saga: Saga) -> tuple[Company, bool]:
        ref = data.company
        if isinstance(ref, ExistingRef):
            company = self.company_repo.get_by_uuid(ref.id)
            if company is None:
                raise NotFoundError("Company", ref.id)
            return company, False
        company, created = self.companies.find_or_create(
            ref.name,
            contact=ref.contact,
            address=ref.address,
            email=ref.email,
            phone_country_code=ref.phone_country_code,
            phone_number=ref.phone_number,
        )
        if created:
            saga.on_failure(f"purge company {company.company_code}", lambda: self.company_repo.purge(company.id))
        return company, created

    def _resolve_driver(self, data: RentalTransactionInput, saga: Saga) -> tuple[Driver, bool]:
        ref = data.driver
        if isinstance(ref, ExistingRef):
            driver = self.driver_repo.get_by_uuid(ref.id)
            if driver is None:
                raise NotFoundError("Driver", ref.id)
            return driver, False
        driver, created = self.drivers.find_or_create(
            ref.name,
            ref.iqama_id.strip(),
            license_no=ref.license_no,
            contact=ref.contact,
            phone_country_code=ref.phone_country_code,
            phone_number=ref.phone_number,
        )
        if created:
            saga.on_failure(f"purge driver {driver.driver_code}", lambda: self.driver_repo.purge(driver.id))
        return driver, created

    def create_rental_transaction(self, data: RentalTransactionInput) -> RentalTransactionSummary:
        load = self._validate(data)
        saga = Saga("rental transaction")
        try:
            company, company_created = self._resolve_company(data, saga)
            driver, driver_created = self._resolve_driver(data, saga)

            load.company_id = company.id
            load.driver_id = driver.id
            load.status = LoadStatus.PENDING
            load.rental_code = self.codes.rental_code(load.rental_date.year)
            load = self.load_repo.create(load)
            saga.on_failure(f"purge load {load.rental_code}", lambda: self.load_repo.purge(load.id))

            acquired_on = data.acquisition_date or datetime.now(LOCAL_TZ).date()
            acquisition = self.payment_repo.create(
                Payment(
                    receipt_code=self.codes.receipt_code(),
                    payment_type=PaymentType.VEHICLE_ACQUISITION,
                    payer=company.name,
                    payer_type=PartyType.COMPANY,
                    payer_id=company.id,
                    payee=settings.supplier_placeholder,
                    payee_type=PartyType.SUPPLIER,
                    total_amount=data.acquisition_cost,
                    total_due=data.acquisition_cost,
                    description=f"Vehicle acquisition - {load.vehicle_type} ({load.plate_no})",
                    vehicle_type=load.vehicle_type,
                    plate_no=load.plate_no,
                    acquisition_date=acquired_on,
                    transaction_date=acquired_on,
                    company_id=company.id,
                )
            )
            saga.on_failure(
                f"purge acquisition payment {acquisition.receipt_code}",
                lambda: self.payment_repo.purge(acquisition.id),
            )

            rental = self.payment_repo.create(
                Payment(
                    receipt_code=self.codes.receipt_code(),
                    payment_type=PaymentType.DRIVER_RENTAL,
                    payer=driver.name,
                    payer_type=PartyType.DRIVER,
                    payer_id=driver.id,
                    payee=company.name,
                    payee_type=PartyType.COMPANY,
                    payee_id=company.id,
                    total_amount=load.rental_amount,
                    total_due=load.rental_amount,
                    description=(
                        f"Rental payment for {load.rental_code} - {load.from_location} to {load.to_location}"
                    ),
                    vehicle_type=load.vehicle_type,
                    plate_no=load.plate_no,
                    from_location=load.from_location,
                    to_location=load.to_location,
                    rental_date=load.rental_date,
                    transaction_date=load.rental_date,
                    load_id=load.id,
                    driver_id=driver.id,
                    company_id=company.id,
                    related_payment_id=acquisition.id,
                )
            )
            saga.on_failure(
                f"purge rental payment {rental.receipt_code}",
                lambda: self.payment_repo.purge(rental.id),
            )

            self.payment_repo.link(acquisition.id, rental.id, load.id)
        except Exception:
            logger.warning("Rental transaction failed, rolling back created rows")
            saga.compensate()
            raise

        logger.info(
            "Rental transaction created: load=%s, acquisition=%s, rental=%s",
            load.rental_code,
            acquisition.receipt_code,
            rental.receipt_code,
        )
        return RentalTransactionSummary(
            company=CompanySummary(
                id=company.id,
                uuid=company.uuid,
                name=company.name,
                company_code=company.company_code,
                created=company_created,
            ),
            driver=DriverSummary(
                id=driver.id,
                uuid=driver.uuid,
                name=driver.name,
                driver_code=driver.driver_code,
                created=driver_created,
            ),
            load=LoadSummary(
                id=load.id,
                uuid=load.uuid,
                rental_code=load.rental_code,
                from_location=load.from_location,
                to_location=load.to_location,
            ),
            payments=PaymentsSummary(
                acquisition_payment_id=acquisition.uuid,
                acquisition_receipt_code=acquisition.receipt_code,
                acquisition_amount=acquisition.total_amount,
                rental_payment_id=rental.uuid,
                rental_receipt_code=rental.receipt_code,
                rental_amount=rental.total_amount,
            ),
        )

    def bulk_create(self, rows: list[dict[str, Any]]) -> BulkResult:
        """Create each row as its own transaction and report per-row failures."""
        result = BulkResult()
        for index, row in enumerate(rows):
            try:
                data = RentalTransactionInput.model_validate(row)
                result.created.append(self.create_rental_transaction(data))
            except PydanticValidationError as exc:
                result.errors.append(BulkRowError(index=index, message="Invalid row", errors=pydantic_errors(exc)))
            except FleetDeskError as exc:
                result.errors.append(
                    BulkRowError(index=index, message=exc.message, errors=getattr(exc, "errors", []))
                )
            except Exception:
                logger.exception("Bulk rental transaction row %d failed unexpectedly", index)
                result.errors.append(BulkRowError(index=index, message="Unexpected error creating row"))
        logger.info("Bulk rental transactions: %d created, %d failed", len(result.created), len(result.errors))
        return result

    # -- read / update -----------------------------------------------------

    def _find_load(self, id_or_code: str) -> Load:
        load = self.load_repo.get_by_uuid(id_or_code) or self.load_repo.get_by_rental_code(id_or_code)
        if load is None:
            raise NotFoundError("Rental transaction", id_or_code)
        return load

    def _legs(self, load: Load) -> tuple[Payment | None, Payment | None]:
        acquisition = rental = None
        for payment in self.payment_repo.list_by_load(load.id):
            if payment.payment_type == PaymentType.VEHICLE_ACQUISITION:
                acquisition = payment
            elif payment.payment_type == PaymentType.DRIVER_RENTAL:
                rental = payment
        if rental is not None and acquisition is None and rental.related_payment_id:
            acquisition = self.payment_repo.get_by_id(rental.related_payment_id)
        return acquisition, rental

    def get_rental_transaction(self, id_or_code: str) -> RentalTransactionDetail:
        load = self._find_load(id_or_code)
        acquisition, rental = self._legs(load)
        return RentalTransactionDetail(
            load=load,
            company=self.company_repo.get_by_id(load.company_id) if load.company_id else None,
            driver=self.driver_repo.get_by_id(load.driver_id) if load.driver_id else None,
            acquisition_payment=acquisition,
            rental_payment=rental,
        )

    def update_rental_transaction(self, id_or_code: str, changes: RentalTransactionUpdate) -> RentalTransactionDetail:
        load = self._find_load(id_or_code)
        acquisition, rental = self._legs(load)
        patch = changes.model_dump(exclude_none=True)
        errors = [
            f"{field}: must be greater than zero"
            for field in ("rental_amount", "acquisition_cost")
            if field in patch and patch[field] <= 0
        ]
        if errors:
            raise ValidationError("Invalid rental transaction update", errors)

        for field in ("vehicle_type", "plate_no", "from_location", "to_location", "description", "rental_date"):
            if field in patch:
                setattr(load, field, patch[field])
        if "rental_amount" in patch:
            load.rental_amount = patch["rental_amount"]

        # Each leg is checked against its own paid amount before anything is written.
        if rental is not None:
            if "rental_amount" in patch:
                ledger.change_total(rental, patch["rental_amount"])
            for field in ("vehicle_type", "plate_no", "from_location", "to_location"):
                if field in patch:
                    setattr(rental, field, patch[field])
            if "rental_date" in patch:
                rental.rental_date = rental.transaction_date = patch["rental_date"]
        if acquisition is not None:
            if "acquisition_cost" in patch:
                ledger.change_total(acquisition, patch["acquisition_cost"])
            for field in ("vehicle_type", "plate_no"):
                if field in patch:
                    setattr(acquisition, field, patch[field])
            if "acquisition_date" in patch:
                acquisition.acquisition_date = acquisition.transaction_date = patch["acquisition_date"]

        self.load_repo.update(load)
        if rental is not None:
            self.payment_repo.update(rental)
        if acquisition is not None:
            self.payment_repo.update(acquisition)
        logger.info("Rental transaction %s updated: %s", load.rental_code, sorted(patch))
        return self.get_rental_transaction(load.uuid)
