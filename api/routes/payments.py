"""
Payments API routes.

Payment method hooks (list / initialize / submit) and a direct hand-off to
the hosted payment portal. Keep this thin: no provider details here.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_payment_method_service, get_payment_portal
from application.ports.payment_gateway import PaymentPortal
from application.dtos.payments import InitializePaymentRequest, PortalInitiateRequest, SubmitPaymentRequest
from application.services.payment_method_service import PaymentMethodService
from core.response import success_response
from core.i18n import t
from core.logging_config import get_logger


router = APIRouter(prefix="/payments", tags=["Payments"])
logger = get_logger(__name__)


@router.get("/methods", summary="List registered payment methods")
async def list_methods(service: PaymentMethodService = Depends(get_payment_method_service)):
    methods = [m.model_dump() for m in service.list_methods()]
    return success_response(data=methods, message=t("payments.methods.listed"))


@router.post("/methods/{method_id}/initialize", summary="Initialize a payment method")
async def initialize_method(
    method_id: str,
    payload: InitializePaymentRequest | None = None,
    service: PaymentMethodService = Depends(get_payment_method_service),
):
    payload = payload or InitializePaymentRequest()
    options = dict(payload.options)
    if payload.container_id:
        options["container_id"] = payload.container_id
    data = await service.initialize(method_id, options or None)
    return success_response(data=data, message=t("payments.method.initialized"))


@router.post("/methods/submit", summary="Validate and submit a payment")
async def submit_method(
    payload: SubmitPaymentRequest,
    service: PaymentMethodService = Depends(get_payment_method_service),
):
    data = await service.submit(payload.method_id, payload.values, container_id=payload.container_id)
    return success_response(data=data, message=t("payments.method.submitted"))


@router.post("", summary="Initiate a payment portal session")
async def initiate_portal_payment(payload: PortalInitiateRequest, portal: PaymentPortal = Depends(get_payment_portal)):
    redirect_url = await portal.initiate(payload)
    logger.info("portal_payment_initiated", order_number=payload.orderNumber)
    return success_response(
        data={"redirect_url": redirect_url, "order_number": payload.orderNumber},
        message=t("payments.portal.initiated"),
    )
