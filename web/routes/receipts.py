from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import Response

from web.deps import get_receipt_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/receipts", tags=["receipts"])


def _pdf(filename: str, content: bytes) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


@router.get("/{kind}/{payment_uuid}")
async def payment_receipt(request: Request, kind: str, payment_uuid: str) -> Response:
    logger.info("GET /receipts/%s/%s", kind, payment_uuid)
    filename, content = get_receipt_service(request).render(kind, payment_uuid)
    return _pdf(filename, content)


@router.get("/{kind}/{payment_uuid}/installments/{installment_uuid}")
async def installment_receipt(request: Request, kind: str, payment_uuid: str, installment_uuid: str) -> Response:
    logger.info("GET /receipts/%s/%s/installments/%s", kind, payment_uuid, installment_uuid)
    filename, content = get_receipt_service(request).render(kind, payment_uuid, installment_uuid)
    return _pdf(filename, content)
