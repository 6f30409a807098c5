from __future__ import annotations

import logging
from typing import Any

from fleetdesk.errors import BusinessRuleError, NotFoundError, ValidationError
from fleetdesk.models.payment import PartyType, Payment, PaymentType
from fleetdesk.models.vehicle import Vehicle, VehicleStatus
from fleetdesk.repositories.base import CompanyRepository, VehicleRepository
from fleetdesk.services.code_service import CodeGenerator
from fleetdesk.services.payment_service import PaymentService
from fleetdesk.settings import settings

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "vehicle_type",
    "plate_no",
    "status",
    "manufacturer",
    "year",
    "capacity",
    "acquisition_cost",
    "acquisition_type",
    "acquisition_date",
}


class VehicleService:
    def __init__(
        self,
        repo: VehicleRepository,
        company_repo: CompanyRepository,
        payments: PaymentService,
        codes: CodeGenerator,
    ) -> None:
        self.repo = repo
        self.company_repo = company_repo
        self.payments = payments
        self.codes = codes

    def _check_plate_free(self, plate_no: str, vehicle_id: int | None = None) -> None:
        holder = self.repo.get_by_plate_no(plate_no, include_deleted=True)
        if holder is None or holder.id == vehicle_id:
            return
        if holder.deleted_at is not None:
            raise BusinessRuleError(f"Plate number {plate_no} belongs to deleted vehicle {holder.vehicle_code}")
        raise BusinessRuleError(f"A vehicle with plate number {plate_no} already exists")

    def create_vehicle(self, company_uuid: str, details: dict[str, Any]) -> tuple[Vehicle, Payment | None]:
        """Create a vehicle and, when it has an acquisition cost, its acquisition payment."""
        errors = []
        if not (details.get("vehicle_type") or "").strip():
            errors.append("vehicle_type: field required")
        if not (details.get("plate_no") or "").strip():
            errors.append("plate_no: field required")
        if (details.get("acquisition_cost") or 0) < 0:
            errors.append("acquisition_cost: must be zero or more")
        if errors:
            raise ValidationError("Invalid vehicle", errors)
        company = self.company_repo.get_by_uuid(company_uuid)
        if company is None:
            raise NotFoundError("Company", company_uuid)
        vehicle = Vehicle(company_id=company.id, **details)
        self._check_plate_free(vehicle.plate_no)

        vehicle.vehicle_code = self.codes.vehicle_code()
        created = self.repo.create(vehicle)
        logger.info("Vehicle created: uuid=%s, code=%s, plate=%s", created.uuid, created.vehicle_code, created.plate_no)

        payment = None
        if created.acquisition_cost > 0:
            payment = self.payments.create_payment(
                Payment(
                    payment_type=PaymentType.VEHICLE_ACQUISITION,
                    payer=company.name,
                    payer_type=PartyType.COMPANY,
                    payer_id=company.id,
                    payee=settings.supplier_placeholder,
                    payee_type=PartyType.SUPPLIER,
                    total_amount=created.acquisition_cost,
                    description=f"Acquisition of {created.vehicle_type} {created.plate_no}",
                    vehicle_type=created.vehicle_type,
                    plate_no=created.plate_no,
                    acquisition_date=created.acquisition_date,
                    transaction_date=created.acquisition_date,
                    vehicle_id=created.id,
                    company_id=company.id,
                )
            )
        return created, payment

    def list_vehicles(self) -> list[Vehicle]:
        result = self.repo.list_all()
        logger.debug("Listed %d vehicles", len(result))
        return result

    def get_vehicle(self, uuid: str) -> Vehicle:
        vehicle = self.repo.get_by_uuid(uuid)
        if vehicle is None:
            raise NotFoundError("Vehicle", uuid)
        return vehicle

    def update_vehicle(self, uuid: str, changes: dict[str, Any]) -> Vehicle:
        vehicle = self.get_vehicle(uuid)
        plate_no = changes.get("plate_no")
        if plate_no and plate_no != vehicle.plate_no:
            self._check_plate_free(plate_no, vehicle.id)
        for field, value in changes.items():
            if field in EDITABLE_FIELDS and value is not None:
                setattr(vehicle, field, value)
        result = self.repo.update(vehicle)
        logger.info("Vehicle updated: uuid=%s", uuid)
        return result

    def delete_vehicle(self, uuid: str) -> None:
        vehicle = self.get_vehicle(uuid)
        if vehicle.status == VehicleStatus.RENTED:
            raise BusinessRuleError("A rented vehicle cannot be deleted")
        self.repo.delete(vehicle.id)
        logger.info("Vehicle %s soft-deleted", uuid)
