"""
Extension server endpoints called by the storefront and the store app
install flow.

These keep their original response shapes ({status, ...} / {error}) rather
than the unified envelope, since existing storefront code parses them.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from api.dependencies import get_auth_service, get_payment_service
from application.dtos.payments import ProcessPaymentRequest
from application.services.auth_service import AppAuthService
from application.services.payment_service import PaymentService
from core.i18n import t
from core.logging_config import get_logger
from domain.common.exceptions import BusinessException


router = APIRouter(tags=["Extension"])
logger = get_logger(__name__)


def _payment_error(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"status": "error", "message": message})


async def _parse_payment_request(request: Request) -> ProcessPaymentRequest:
    try:
        body = await request.json()
    except ValueError:
        raise ValueError("Invalid JSON body") from None
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    try:
        return ProcessPaymentRequest.model_validate(body)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(loc) for loc in first.get("loc", ()))
        raise ValueError(f"Invalid {field}: {first.get('msg', 'invalid value')}") from None


@router.get("/auth/callback", summary="Store app auth callback")
async def auth_callback(
    code: Optional[str] = None,
    scope: Optional[str] = None,
    context: Optional[str] = None,
    service: AppAuthService = Depends(get_auth_service),
):
    try:
        await service.handle_callback(code=code, scope=scope, context=context)
    except BusinessException as exc:
        logger.warning("app_auth_failed", error_type=exc.error_type, error=exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})
    return PlainTextResponse(t("auth.callback.success"), status_code=200)


@router.post("/process-payment", summary="Process a storefront payment")
async def process_payment(request: Request, service: PaymentService = Depends(get_payment_service)):
    try:
        req = await _parse_payment_request(request)
        result = await service.process_payment(req)
    except ValueError as exc:
        return _payment_error(str(exc))
    except BusinessException as exc:
        logger.warning("payment_process_failed", error_type=exc.error_type, error=exc.message)
        return _payment_error(exc.message)
    return result.model_dump(mode="json")


@router.post("/process-payment-test", summary="Canned payment result for integration tests")
async def process_payment_test(request: Request):
    try:
        req = await _parse_payment_request(request)
    except ValueError as exc:
        return _payment_error(str(exc))
    return PaymentService.process_test_payment(req).model_dump(mode="json")
