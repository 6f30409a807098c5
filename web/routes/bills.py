from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Request

from fleetdesk.models.bill import Bill
from web.deps import get_bill_service
from web.schemas import BillCreate, BillUpdate, InstallmentIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bills", tags=["bills"])


@router.get("")
async def bill_list(
    request: Request,
    bill_type: str | None = Query(default=None, alias="type"),
    status: str | None = None,
) -> list[Bill]:
    logger.info("GET /bills - type=%s status=%s", bill_type, status)
    return get_bill_service(request).list_bills(bill_type=bill_type, status=status)


@router.post("", status_code=201)
async def bill_create(request: Request, body: BillCreate) -> Bill:
    logger.info("POST /bills - creating %s bill %r", body.type.value, body.name)
    return get_bill_service(request).create_bill(
        body.type, body.name, body.total_amount, body.date, customer_id=body.customer_id
    )


@router.get("/{uuid}")
async def bill_detail(request: Request, uuid: str) -> Bill:
    return get_bill_service(request).get_bill(uuid)


@router.put("/{uuid}")
async def bill_update(request: Request, uuid: str, body: BillUpdate) -> Bill:
    logger.info("PUT /bills/%s", uuid)
    return get_bill_service(request).update_bill(
        uuid,
        name=body.name,
        total_amount=body.total_amount,
        bill_date=body.date,
        bill_type=body.type,
        customer_id=body.customer_id,
    )


@router.delete("/{uuid}")
async def bill_delete(request: Request, uuid: str) -> dict:
    logger.info("DELETE /bills/%s", uuid)
    get_bill_service(request).delete_bill(uuid)
    return {"message": "Bill deleted successfully"}


@router.post("/{uuid}/installments", status_code=201)
async def bill_installment_add(request: Request, uuid: str, body: InstallmentIn) -> Bill:
    logger.info("POST /bills/%s/installments - amount=%s", uuid, body.amount)
    return get_bill_service(request).add_installment(uuid, body.amount, body.paid_date, body.notes)


@router.put("/{uuid}/installments/{installment_uuid}")
async def bill_installment_update(request: Request, uuid: str, installment_uuid: str, body: InstallmentIn) -> Bill:
    logger.info("PUT /bills/%s/installments/%s", uuid, installment_uuid)
    return get_bill_service(request).update_installment(
        uuid, installment_uuid, body.amount, body.paid_date, body.notes
    )


@router.delete("/{uuid}/installments/{installment_uuid}")
async def bill_installment_delete(request: Request, uuid: str, installment_uuid: str) -> Bill:
    logger.info("DELETE /bills/%s/installments/%s", uuid, installment_uuid)
    return get_bill_service(request).delete_installment(uuid, installment_uuid)
