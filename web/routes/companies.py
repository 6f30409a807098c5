from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from fleetdesk.models.company import Company
from web.deps import get_company_service
from web.schemas import CompanyIn, CompanyUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("")
async def company_list(request: Request) -> list[Company]:
    return get_company_service(request).list_companies()


@router.post("", status_code=201)
async def company_create(request: Request, body: CompanyIn) -> Company:
    logger.info("POST /companies - %r", body.name)
    return get_company_service(request).create_company(Company(**body.model_dump()))


@router.get("/{uuid}")
async def company_detail(request: Request, uuid: str) -> Company:
    return get_company_service(request).get_company(uuid)


@router.put("/{uuid}")
async def company_update(request: Request, uuid: str, body: CompanyUpdate) -> Company:
    logger.info("PUT /companies/%s", uuid)
    return get_company_service(request).update_company(uuid, body.model_dump(exclude_unset=True))


@router.delete("/{uuid}")
async def company_delete(request: Request, uuid: str) -> dict:
    logger.info("DELETE /companies/%s", uuid)
    get_company_service(request).delete_company(uuid)
    return {"message": "Company deleted successfully"}
