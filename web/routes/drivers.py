from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from fleetdesk.models.driver import Driver
from web.deps import get_driver_service
from web.schemas import DriverIn, DriverUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.get("")
async def driver_list(request: Request) -> list[Driver]:
    return get_driver_service(request).list_drivers()


@router.post("", status_code=201)
async def driver_create(request: Request, body: DriverIn) -> Driver:
    logger.info("POST /drivers - %r", body.name)
    return get_driver_service(request).create_driver(Driver(**body.model_dump()))


@router.get("/{uuid}")
async def driver_detail(request: Request, uuid: str) -> Driver:
    return get_driver_service(request).get_driver(uuid)


@router.put("/{uuid}")
async def driver_update(request: Request, uuid: str, body: DriverUpdate) -> Driver:
    logger.info("PUT /drivers/%s", uuid)
    return get_driver_service(request).update_driver(uuid, body.model_dump(exclude_unset=True))


@router.delete("/{uuid}")
async def driver_delete(request: Request, uuid: str) -> dict:
    logger.info("DELETE /drivers/%s", uuid)
    get_driver_service(request).delete_driver(uuid)
    return {"message": "Driver deleted successfully"}
