"""
Factories for payment processors, the payment portal and the app auth client.
"""
from __future__ import annotations

from typing import Optional

from core.config import settings
from core.settings import payment_settings
from application.ports.payment_gateway import AppAuthClient, PaymentPortal, PaymentProcessor


def get_payment_processor(name: Optional[str] = None) -> PaymentProcessor:
    provider = (name or payment_settings.default_processor).lower()
    if provider in {"simulated", "stub", "default"}:
        from .simulated_processor import SimulatedPaymentProcessor
        return SimulatedPaymentProcessor()
    raise ValueError(f"Unsupported payment processor: {provider}")


def get_payment_portal() -> PaymentPortal:
    from .portal_client import PaymentPortalClient
    return PaymentPortalClient()


def get_app_auth_client() -> Optional[AppAuthClient]:
    """Return None when the app has no OAuth credentials configured."""
    if not (settings.app.client_id and settings.app.client_secret):
        return None
    from .app_auth_client import AppAuthHttpClient
    return AppAuthHttpClient()
