from __future__ import annotations

import logging
from typing import Any

from fleetdesk.errors import NotFoundError, ValidationError
from fleetdesk.models.company import Company
from fleetdesk.repositories.base import CompanyRepository
from fleetdesk.services.code_service import CodeGenerator

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"name", "contact", "address", "email", "phone_country_code", "phone_number"}


class CompanyService:
    def __init__(self, repo: CompanyRepository, codes: CodeGenerator) -> None:
        self.repo = repo
        self.codes = codes

    def create_company(self, company: Company) -> Company:
        if not company.name or not company.name.strip():
            raise ValidationError("Company name is required", ["name: field required"])
        company.name = company.name.strip()
        company.company_code = self.codes.company_code()
        result = self.repo.create(company)
        logger.info("Company created: uuid=%s, code=%s, name=%s", result.uuid, result.company_code, result.name)
        return result

    def find_or_create(self, name: str, **details: Any) -> tuple[Company, bool]:
        """Return the company named exactly ``name``, creating it when missing.

        The boolean is True when a new row was created.
        """
        existing = self.repo.get_by_name(name.strip())
        if existing is not None:
            logger.debug("Reusing company %s for name=%s", existing.company_code, name)
            return existing, False
        return self.create_company(Company(name=name, **details)), True

    def list_companies(self) -> list[Company]:
        result = self.repo.list_all()
        logger.debug("Listed %d companies", len(result))
        return result

    def get_company(self, uuid: str) -> Company:
        company = self.repo.get_by_uuid(uuid)
        if company is None:
            raise NotFoundError("Company", uuid)
        return company

    def get_company_by_id(self, company_id: int) -> Company:
        company = self.repo.get_by_id(company_id)
        if company is None:
            raise NotFoundError("Company", company_id)
        return company

    def update_company(self, uuid: str, changes: dict[str, Any]) -> Company:
        company = self.get_company(uuid)
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError("Company name is required", ["name: field required"])
        for field, value in changes.items():
            if field in EDITABLE_FIELDS and value is not None:
                setattr(company, field, value)
        result = self.repo.update(company)
        logger.info("Company updated: uuid=%s", uuid)
        return result

    def delete_company(self, uuid: str) -> None:
        company = self.get_company(uuid)
        self.repo.delete(company.id)
        logger.info("Company %s soft-deleted", uuid)
