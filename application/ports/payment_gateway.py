"""
Payment ports (application/ports) exposing replaceable protocols.

Application depends on these Protocols; infrastructure implements adapters.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from application.dtos.payments import (
    AppCredentials,
    PortalInitiateRequest,
    ProcessPaymentRequest,
    ProcessorTransaction,
)


@runtime_checkable
class PaymentProcessor(Protocol):
    """Processes a storefront payment with the merchant's payment provider."""

    provider: str

    async def process_payment(self, req: ProcessPaymentRequest) -> ProcessorTransaction: ...


@runtime_checkable
class PaymentPortal(Protocol):
    """External hosted payment portal the shopper is redirected to."""

    provider: str

    async def initiate(self, req: PortalInitiateRequest) -> str:
        """Register the order with the portal and return the shopper redirect URL."""
        ...


@runtime_checkable
class AppAuthClient(Protocol):
    async def exchange_code(
        self, *, code: str, scope: Optional[str], context: Optional[str]
    ) -> AppCredentials: ...
