from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from fleetdesk.models.load import Load
from web.deps import get_load_service
from web.schemas import AssignDriver, LoadCreate, LoadUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/loads", tags=["loads"])


@router.get("")
async def load_list(request: Request, status: str | None = None, query: str | None = None) -> list[Load]:
    logger.info("GET /loads - status=%s query=%s", status, query)
    service = get_load_service(request)
    if query is not None:
        return service.search_loads(query)
    return service.list_loads(status=status)


@router.post("", status_code=201)
async def load_create(request: Request, body: LoadCreate) -> dict:
    logger.info("POST /loads - %s -> %s", body.from_location, body.to_location)
    fields = body.model_dump(exclude={"vehicle_id", "company_id"})
    load, payment = get_load_service(request).create_load(
        Load(**fields), vehicle_uuid=body.vehicle_id, company_uuid=body.company_id
    )
    return {"load": load.model_dump(mode="json"), "rental_payment": payment.model_dump(mode="json")}


@router.get("/{uuid}")
async def load_detail(request: Request, uuid: str) -> Load:
    return get_load_service(request).get_load(uuid)


@router.put("/{uuid}")
async def load_update(request: Request, uuid: str, body: LoadUpdate) -> Load:
    logger.info("PUT /loads/%s", uuid)
    return get_load_service(request).update_load(uuid, body.model_dump(exclude_none=True))


@router.delete("/{uuid}")
async def load_delete(request: Request, uuid: str) -> dict:
    logger.info("DELETE /loads/%s", uuid)
    get_load_service(request).delete_load(uuid)
    return {"message": "Load deleted successfully"}


@router.put("/{uuid}/assign-driver")
async def load_assign_driver(request: Request, uuid: str, body: AssignDriver) -> Load:
    logger.info("PUT /loads/%s/assign-driver - driver=%s", uuid, body.driver_id)
    return get_load_service(request).assign_driver(uuid, body.driver_id)


@router.put("/{uuid}/start")
async def load_start(request: Request, uuid: str) -> Load:
    logger.info("PUT /loads/%s/start", uuid)
    return get_load_service(request).start_transit(uuid)


@router.put("/{uuid}/complete")
async def load_complete(request: Request, uuid: str) -> Load:
    logger.info("PUT /loads/%s/complete", uuid)
    return get_load_service(request).complete(uuid)


@router.put("/{uuid}/cancel")
async def load_cancel(request: Request, uuid: str) -> Load:
    logger.info("PUT /loads/%s/cancel", uuid)
    return get_load_service(request).cancel(uuid)
