"""
API dependencies: application services built once in the lifespan and kept
on ``app.state``.
"""
from fastapi import Request

from application.ports.payment_gateway import PaymentPortal
from application.services.auth_service import AppAuthService
from application.services.checkout_service import CheckoutApplicationService
from application.services.payment_method_service import PaymentMethodService
from application.services.payment_service import PaymentService


def _state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise RuntimeError(f"{name} is not initialized")
    return service


async def get_payment_service(request: Request) -> PaymentService:
    return _state(request, "payment_service")


async def get_payment_method_service(request: Request) -> PaymentMethodService:
    return _state(request, "payment_method_service")


async def get_checkout_service(request: Request) -> CheckoutApplicationService:
    return _state(request, "checkout_service")


async def get_auth_service(request: Request) -> AppAuthService:
    return _state(request, "auth_service")


async def get_payment_portal(request: Request) -> PaymentPortal:
    return _state(request, "payment_portal")
