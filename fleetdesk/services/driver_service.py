from __future__ import annotations

import logging
from typing import Any

from fleetdesk.errors import BusinessRuleError, NotFoundError, ValidationError
from fleetdesk.models.driver import Driver
from fleetdesk.repositories.base import DriverRepository
from fleetdesk.services.code_service import CodeGenerator

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "name",
    "contact",
    "license_no",
    "iqama_id",
    "status",
    "email",
    "phone_country_code",
    "phone_number",
    "address",
}


class DriverService:
    def __init__(self, repo: DriverRepository, codes: CodeGenerator) -> None:
        self.repo = repo
        self.codes = codes

    def _check_iqama_free(self, iqama_id: str, driver_id: int | None = None) -> None:
        """Iqama ids stay reserved by soft-deleted drivers."""
        holder = self.repo.get_by_iqama_id(iqama_id, include_deleted=True)
        if holder is None or holder.id == driver_id:
            return
        if holder.deleted_at is not None:
            raise BusinessRuleError(f"Iqama id {iqama_id} belongs to deleted driver {holder.driver_code}")
        raise BusinessRuleError(f"A driver with iqama id {iqama_id} already exists")

    def create_driver(self, driver: Driver) -> Driver:
        if not driver.name or not driver.name.strip():
            raise ValidationError("Driver name is required", ["name: field required"])
        driver.name = driver.name.strip()
        if driver.iqama_id:
            self._check_iqama_free(driver.iqama_id)
        driver.driver_code = self.codes.driver_code()
        result = self.repo.create(driver)
        logger.info("Driver created: uuid=%s, code=%s, name=%s", result.uuid, result.driver_code, result.name)
        return result

    def find_or_create(self, name: str, iqama_id: str, **details: Any) -> tuple[Driver, bool]:
        """Return the driver holding ``iqama_id``, creating one when missing."""
        existing = self.repo.get_by_iqama_id(iqama_id)
        if existing is not None:
            logger.debug("Reusing driver %s for iqama_id=%s", existing.driver_code, iqama_id)
            return existing, False
        return self.create_driver(Driver(name=name, iqama_id=iqama_id, **details)), True

    def list_drivers(self) -> list[Driver]:
        result = self.repo.list_all()
        logger.debug("Listed %d drivers", len(result))
        return result

    def get_driver(self, uuid: str) -> Driver:
        driver = self.repo.get_by_uuid(uuid)
        if driver is None:
            raise NotFoundError("Driver", uuid)
        return driver

    def get_driver_by_id(self, driver_id: int) -> Driver:
        driver = self.repo.get_by_id(driver_id)
        if driver is None:
            raise NotFoundError("Driver", driver_id)
        return driver

    def update_driver(self, uuid: str, changes: dict[str, Any]) -> Driver:
        driver = self.get_driver(uuid)
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError("Driver name is required", ["name: field required"])
        iqama_id = changes.get("iqama_id")
        if iqama_id and iqama_id != driver.iqama_id:
            self._check_iqama_free(iqama_id, driver.id)
        for field, value in changes.items():
            if field in EDITABLE_FIELDS and value is not None:
                setattr(driver, field, value)
        result = self.repo.update(driver)
        logger.info("Driver updated: uuid=%s", uuid)
        return result

    def delete_driver(self, uuid: str) -> None:
        driver = self.get_driver(uuid)
        self.repo.delete(driver.id)
        logger.info("Driver %s soft-deleted", uuid)
