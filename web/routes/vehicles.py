from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from fleetdesk.models.vehicle import Vehicle
from web.deps import get_vehicle_service
from web.schemas import VehicleIn, VehicleUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.get("")
async def vehicle_list(request: Request) -> list[Vehicle]:
    return get_vehicle_service(request).list_vehicles()


@router.post("", status_code=201)
async def vehicle_create(request: Request, body: VehicleIn) -> dict:
    logger.info("POST /vehicles - plate=%s", body.plate_no)
    vehicle, payment = get_vehicle_service(request).create_vehicle(
        body.company_id, body.model_dump(exclude={"company_id"})
    )
    return {
        "vehicle": vehicle.model_dump(mode="json"),
        "acquisition_payment": payment.model_dump(mode="json") if payment else None,
    }


@router.get("/{uuid}")
async def vehicle_detail(request: Request, uuid: str) -> Vehicle:
    return get_vehicle_service(request).get_vehicle(uuid)


@router.put("/{uuid}")
async def vehicle_update(request: Request, uuid: str, body: VehicleUpdate) -> Vehicle:
    logger.info("PUT /vehicles/%s", uuid)
    return get_vehicle_service(request).update_vehicle(uuid, body.model_dump(exclude_none=True))


@router.delete("/{uuid}")
async def vehicle_delete(request: Request, uuid: str) -> dict:
    logger.info("DELETE /vehicles/%s", uuid)
    get_vehicle_service(request).delete_vehicle(uuid)
    return {"message": "Vehicle deleted successfully"}
