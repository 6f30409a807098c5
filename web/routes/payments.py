from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from fleetdesk.models.payment import Payment
from web.deps import get_payment_service
from web.schemas import InstallmentIn, PaymentCreate, PaymentUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("")
async def payment_list(request: Request, payment_type: str | None = None, status: str | None = None) -> list[Payment]:
    logger.info("GET /payments - type=%s status=%s", payment_type, status)
    return get_payment_service(request).list_payments(payment_type=payment_type, status=status)


@router.post("", status_code=201)
async def payment_create(request: Request, body: PaymentCreate) -> Payment:
    logger.info("POST /payments - creating %s payment", body.payment_type.value)
    return get_payment_service(request).create_payment(Payment(**body.model_dump()))


@router.get("/{uuid}")
async def payment_detail(request: Request, uuid: str) -> Payment:
    return get_payment_service(request).get_payment(uuid)


@router.put("/{uuid}")
async def payment_update(request: Request, uuid: str, body: PaymentUpdate) -> Payment:
    logger.info("PUT /payments/%s", uuid)
    return get_payment_service(request).update_payment(uuid, body.model_dump(exclude_none=True))


@router.delete("/{uuid}")
async def payment_delete(request: Request, uuid: str) -> dict:
    logger.info("DELETE /payments/%s", uuid)
    get_payment_service(request).delete_payment(uuid)
    return {"message": "Payment deleted successfully"}


@router.post("/{uuid}/installments", status_code=201)
async def payment_installment_add(request: Request, uuid: str, body: InstallmentIn) -> Payment:
    logger.info("POST /payments/%s/installments - amount=%s", uuid, body.amount)
    return get_payment_service(request).add_installment(uuid, body.amount, body.paid_date, body.notes)


@router.put("/{uuid}/installments/{installment_uuid}")
async def payment_installment_update(
    request: Request, uuid: str, installment_uuid: str, body: InstallmentIn
) -> Payment:
    logger.info("PUT /payments/%s/installments/%s", uuid, installment_uuid)
    return get_payment_service(request).update_installment(
        uuid, installment_uuid, body.amount, body.paid_date, body.notes
    )


@router.delete("/{uuid}/installments/{installment_uuid}")
async def payment_installment_delete(request: Request, uuid: str, installment_uuid: str) -> Payment:
    logger.info("DELETE /payments/%s/installments/%s", uuid, installment_uuid)
    return get_payment_service(request).delete_installment(uuid, installment_uuid)
