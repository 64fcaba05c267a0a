"""
Payment DTOs (Pydantic v2) used at application boundaries.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class PaymentData(BaseModel):
    """Payment data posted by the storefront.

    Amount and currency are echoed back exactly as sent; unknown keys are kept.
    """
    amount: Any = None
    currency: Any = None

    model_config = ConfigDict(extra="allow")


class ProcessPaymentRequest(BaseModel):
    payment_data: Optional[PaymentData] = None
    # Store order ids arrive as integers from the storefront, strings from tooling
    order_id: Optional[Union[int, str]] = None
    context: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.payment_data) and bool(self.order_id)


class ProcessorTransaction(BaseModel):
    id: str
    status: str = "approved"
    raw: Optional[dict[str, Any]] = None


class ProcessPaymentResult(BaseModel):
    status: str = "success"
    transaction_id: str
    amount: Any = None
    currency: Any = None
    timestamp: str = Field(default_factory=utc_timestamp)


class InitializePaymentRequest(BaseModel):
    container_id: Optional[str] = None
    options: dict[str, Any] = Field(default_factory=dict)


class SubmitPaymentRequest(BaseModel):
    """Values the shopper entered, keyed by form field id."""
    method_id: str
    container_id: Optional[str] = None
    values: dict[str, Any] = Field(default_factory=dict)


class RegisteredPaymentMethod(BaseModel):
    id: str
    type: str


# Payment portal

class PortalAddress(BaseModel):
    address1: str
    address2: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    zipCode: str = ""
    phoneNumber: str = "N/A"


class PortalProduct(BaseModel):
    productDescription: str
    quantity: str
    productAmount: str


class PortalInitiateRequest(BaseModel):
    """Body of the payment portal initiate call (portal field names)."""
    address: PortalAddress
    buid: str
    country: str
    region: str
    currency: str
    successUrl: str
    cancelUrl: str
    clientSessionId: str
    orderDescription: str
    amount: str
    segment: str
    language: str
    salesChannel: str
    companyNumber: str
    products: list[PortalProduct] = Field(default_factory=list)
    paymentMode: str
    orderNumber: str


class PortalRedirect(BaseModel):
    redirect_url: str
    order_number: str
    client_session_id: str


class AppCredentials(BaseModel):
    """OAuth credentials issued to the store app for one store context."""
    access_token: str
    scope: Optional[str] = None
    context: str
    user: Optional[dict[str, Any]] = None
    account_uuid: Optional[str] = None
