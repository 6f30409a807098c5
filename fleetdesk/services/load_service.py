from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fleetdesk.constants import LOCAL_TZ, UNASSIGNED_PAYER
from fleetdesk.errors import BusinessRuleError, NotFoundError, ValidationError
from fleetdesk.models.load import Load, LoadStatus
from fleetdesk.models.payment import PartyType, Payment, PaymentType
from fleetdesk.models.vehicle import VehicleStatus
from fleetdesk.repositories.base import (
    CompanyRepository,
    DriverRepository,
    LoadRepository,
    PaymentRepository,
    VehicleRepository,
)
from fleetdesk.services import ledger
from fleetdesk.services.code_service import CodeGenerator

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "vehicle_type",
    "plate_no",
    "from_location",
    "to_location",
    "description",
    "rental_type",
    "rental_price_per_day",
    "distance_km",
    "start_date",
    "end_date",
    "rental_amount",
    "rental_date",
}

PRICING_FIELDS = {"rental_type", "rental_price_per_day", "distance_km", "start_date", "end_date"}


class LoadService:
    def __init__(
        self,
        repo: LoadRepository,
        payment_repo: PaymentRepository,
        driver_repo: DriverRepository,
        vehicle_repo: VehicleRepository,
        company_repo: CompanyRepository,
        codes: CodeGenerator,
    ) -> None:
        self.repo = repo
        self.payment_repo = payment_repo
        self.driver_repo = driver_repo
        self.vehicle_repo = vehicle_repo
        self.company_repo = company_repo
        self.codes = codes

    # -- lookups -----------------------------------------------------------

    def get_load(self, uuid: str) -> Load:
        load = self.repo.get_by_uuid(uuid)
        logger.debug("get_load uuid=%s found=%s", uuid, load is not None)
        if load is None:
            raise NotFoundError("Load", uuid)
        return load

    def list_loads(self, status: str | None = None) -> list[Load]:
        result = self.repo.list_all(status=status)
        logger.debug("Listed %d loads (status=%s)", len(result), status)
        return result

    def search_loads(self, query: str) -> list[Load]:
        if not query or not query.strip():
            raise ValidationError("Search query is required", ["query: field required"])
        result = self.repo.search(query.strip())
        logger.debug("Load search %r matched %d", query, len(result))
        return result

    def rental_payment_for(self, load: Load) -> Payment | None:
        for payment in self.payment_repo.list_by_load(load.id):
            if payment.payment_type == PaymentType.DRIVER_RENTAL:
                return payment
        return None

    # -- create / update ---------------------------------------------------

    def create_load(
        self,
        load: Load,
        vehicle_uuid: str | None = None,
        company_uuid: str | None = None,
    ) -> tuple[Load, Payment]:
        """Create a pending load and its driver-rental payment.

        ``vehicle_uuid`` and ``company_uuid`` are public references resolved to the
        load's internal ids; a referenced vehicle fills in a blank type and plate.
        """
        if vehicle_uuid:
            vehicle = self.vehicle_repo.get_by_uuid(vehicle_uuid)
            if vehicle is None:
                raise NotFoundError("Vehicle", vehicle_uuid)
            load.vehicle_id = vehicle.id
            load.vehicle_type = load.vehicle_type or vehicle.vehicle_type
            load.plate_no = load.plate_no or vehicle.plate_no

        errors = [
            f"{field}: field required"
            for field in ("vehicle_type", "from_location", "to_location")
            if not getattr(load, field)
        ]
        load.reprice()
        if load.rental_amount <= 0:
            errors.append("rental_amount: provide rental_amount or complete pricing fields")
        if errors:
            raise ValidationError("Invalid load", errors)

        company = None
        if company_uuid:
            company = self.company_repo.get_by_uuid(company_uuid)
            if company is None:
                raise NotFoundError("Company", company_uuid)
            load.company_id = company.id
        elif load.company_id is not None:
            company = self.company_repo.get_by_id(load.company_id)
            if company is None:
                raise NotFoundError("Company", load.company_id)
        payee = company.name if company else ""

        load.status = LoadStatus.PENDING
        load.rental_date = load.rental_date or datetime.now(LOCAL_TZ).date()
        load.rental_code = self.codes.rental_code(load.rental_date.year)
        created = self.repo.create(load)
        logger.info("Load created: uuid=%s, code=%s, amount=%d", created.uuid, created.rental_code, created.rental_amount)

        try:
            payment = self.payment_repo.create(
                Payment(
                    receipt_code=self.codes.receipt_code(),
                    payment_type=PaymentType.DRIVER_RENTAL,
                    payer=UNASSIGNED_PAYER,
                    payee=payee,
                    payee_type=PartyType.COMPANY if load.company_id else None,
                    payee_id=load.company_id,
                    total_amount=created.rental_amount,
                    total_due=created.rental_amount,
                    description=created.description,
                    vehicle_type=created.vehicle_type,
                    plate_no=created.plate_no,
                    from_location=created.from_location,
                    to_location=created.to_location,
                    rental_date=created.rental_date,
                    transaction_date=created.rental_date,
                    vehicle_id=created.vehicle_id,
                    load_id=created.id,
                    company_id=created.company_id,
                )
            )
        except Exception:
            logger.exception("Rental payment creation failed, removing load %s", created.rental_code)
            self.repo.purge(created.id)
            raise
        logger.info("Rental payment %s created for load %s", payment.receipt_code, created.rental_code)
        return created, payment

    def update_load(self, uuid: str, changes: dict[str, Any]) -> Load:
        load = self.get_load(uuid)
        for field, value in changes.items():
            if field in EDITABLE_FIELDS and value is not None:
                setattr(load, field, value)
        if PRICING_FIELDS & {k for k, v in changes.items() if v is not None}:
            load.reprice()
        if load.rental_amount <= 0:
            raise ValidationError("Invalid load", ["rental_amount: must be greater than zero"])

        # Both rows are validated before either is written.
        payment = self.rental_payment_for(load)
        if payment is not None:
            if payment.total_amount != load.rental_amount:
                ledger.change_total(payment, load.rental_amount)
            payment.vehicle_type = load.vehicle_type
            payment.plate_no = load.plate_no
            payment.from_location = load.from_location
            payment.to_location = load.to_location
            payment.rental_date = load.rental_date
            payment.transaction_date = load.rental_date

        result = self.repo.update(load)
        if payment is not None:
            self.payment_repo.update(payment)
        logger.info("Load updated: uuid=%s, amount=%d", uuid, result.rental_amount)
        return result

    # -- state machine -----------------------------------------------------

    def _transition(self, load: Load, target: LoadStatus) -> None:
        if not load.can_transition(target):
            raise BusinessRuleError(f"Cannot move load from {load.status.value} to {target.value}")
        load.status = target

    def assign_driver(self, uuid: str, driver_uuid: str) -> Load:
        load = self.get_load(uuid)
        driver = self.driver_repo.get_by_uuid(driver_uuid)
        if driver is None:
            raise NotFoundError("Driver", driver_uuid)
        self._transition(load, LoadStatus.ASSIGNED)
        load.driver_id = driver.id
        result = self.repo.update(load)

        if load.vehicle_id is not None:
            self.vehicle_repo.update_status(load.vehicle_id, VehicleStatus.RENTED)

        payment = self.rental_payment_for(load)
        if payment is not None:
            payment.payer = driver.name
            payment.payer_type = PartyType.DRIVER
            payment.payer_id = driver.id
            payment.driver_id = driver.id
            self.payment_repo.update(payment)
        logger.info("Load %s assigned to driver %s", load.rental_code, driver.driver_code)
        return result

    def start_transit(self, uuid: str) -> Load:
        load = self.get_load(uuid)
        self._transition(load, LoadStatus.IN_TRANSIT)
        result = self.repo.update(load)
        logger.info("Load %s in transit", load.rental_code)
        return result

    def complete(self, uuid: str) -> Load:
        load = self.get_load(uuid)
        self._transition(load, LoadStatus.COMPLETED)
        result = self.repo.update(load)
        if load.vehicle_id is not None:
            self.vehicle_repo.update_status(load.vehicle_id, VehicleStatus.AVAILABLE)
        logger.info("Load %s completed", load.rental_code)
        return result

    def cancel(self, uuid: str) -> Load:
        load = self.get_load(uuid)
        was_assigned = load.status == LoadStatus.ASSIGNED
        self._transition(load, LoadStatus.CANCELLED)
        result = self.repo.update(load)
        if was_assigned and load.vehicle_id is not None:
            self.vehicle_repo.update_status(load.vehicle_id, VehicleStatus.AVAILABLE)
        logger.info("Load %s cancelled", load.rental_code)
        return result

    # -- delete ------------------------------------------------------------

    def delete_load(self, uuid: str) -> None:
        load = self.get_load(uuid)
        payments = self.payment_repo.list_by_load(load.id)
        if any(p.installments for p in payments):
            raise BusinessRuleError("Cannot delete a load whose payments already have installments")
        for payment in payments:
            self.payment_repo.delete(payment.id)
        self.repo.delete(load.id)
        if load.status in (LoadStatus.ASSIGNED, LoadStatus.IN_TRANSIT) and load.vehicle_id is not None:
            self.vehicle_repo.update_status(load.vehicle_id, VehicleStatus.AVAILABLE)
        logger.info("Load %s soft-deleted with %d payment(s)", load.rental_code, len(payments))
