"""
Checkout DTOs: the order snapshot the storefront posts and the session view
returned to it.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from domain.checkout.entity import (
    Address,
    Cart,
    CheckoutSnapshot,
    Consignment,
    Customer,
    CustomerViewType,
    FlashMessage,
    LineItem,
)


class AddressDTO(BaseModel):
    first_name: str = ""
    last_name: str = ""
    address1: str = ""
    address2: Optional[str] = None
    city: str = ""
    state_or_province_code: str = ""
    country_code: str = ""
    postal_code: str = ""
    phone: Optional[str] = None

    def to_domain(self) -> Address:
        return Address(**self.model_dump())


class LineItemDTO(BaseModel):
    name: str
    quantity: int = Field(ge=1)
    extended_list_price: Decimal


class CartDTO(BaseModel):
    id: str
    currency_code: str = "USD"
    cart_amount: Decimal
    physical_items: list[LineItemDTO] = Field(default_factory=list)

    @field_validator("currency_code")
    @classmethod
    def _upper_currency(cls, v: str) -> str:
        u = (v or "").upper()
        if len(u) != 3 or not u.isalpha():
            raise ValueError("currency must be ISO-4217 alpha-3")
        return u

    def to_domain(self) -> Cart:
        return Cart(
            id=self.id,
            currency_code=self.currency_code,
            cart_amount=self.cart_amount,
            physical_items=[
                LineItem(name=i.name, quantity=i.quantity, extended_list_price=i.extended_list_price)
                for i in self.physical_items
            ],
        )


class ConsignmentDTO(BaseModel):
    id: str
    shipping_address: Optional[AddressDTO] = None
    selected_shipping_option_id: Optional[str] = None

    def to_domain(self) -> Consignment:
        return Consignment(
            id=self.id,
            shipping_address=self.shipping_address.to_domain() if self.shipping_address else None,
            selected_shipping_option_id=self.selected_shipping_option_id,
        )


class CustomerDTO(BaseModel):
    email: Optional[str] = None
    is_guest: bool = True


class FlashMessageDTO(BaseModel):
    message: str
    title: Optional[str] = None


class CheckoutSnapshotDTO(BaseModel):
    cart: Optional[CartDTO] = None
    customer: CustomerDTO = Field(default_factory=CustomerDTO)
    billing_address: Optional[AddressDTO] = None
    consignments: list[ConsignmentDTO] = Field(default_factory=list)
    is_guest_enabled: bool = True
    is_price_hidden_from_guests: bool = False
    is_embedded: bool = False
    login_url: Optional[str] = None
    cart_url: Optional[str] = None
    create_account_url: Optional[str] = None
    has_multi_shipping_enabled: bool = False
    billing_same_as_shipping_enabled: bool = True
    default_newsletter_signup: bool = False
    error_flash_messages: list[FlashMessageDTO] = Field(default_factory=list)

    def to_domain(self, defaults: Optional[dict[str, str]] = None) -> CheckoutSnapshot:
        urls = {k: v for k, v in (defaults or {}).items() if v}
        for key in ("login_url", "cart_url", "create_account_url"):
            value = getattr(self, key)
            if value:
                urls[key] = value
        return CheckoutSnapshot(
            cart=self.cart.to_domain() if self.cart else None,
            customer=Customer(email=self.customer.email, is_guest=self.customer.is_guest),
            billing_address=self.billing_address.to_domain() if self.billing_address else None,
            consignments=[c.to_domain() for c in self.consignments],
            is_guest_enabled=self.is_guest_enabled,
            is_price_hidden_from_guests=self.is_price_hidden_from_guests,
            is_embedded=self.is_embedded,
            has_multi_shipping_enabled=self.has_multi_shipping_enabled,
            billing_same_as_shipping_enabled=self.billing_same_as_shipping_enabled,
            default_newsletter_signup=self.default_newsletter_signup,
            error_flash_messages=[FlashMessage(message=m.message, title=m.title) for m in self.error_flash_messages],
            **urls,
        )


class CheckoutSessionRecord(BaseModel):
    """What the session store persists for one checkout."""
    id: str
    snapshot: CheckoutSnapshotDTO
    state: dict[str, Any] = Field(default_factory=dict)


# Request bodies

class CreateCheckoutSession(BaseModel):
    snapshot: CheckoutSnapshotDTO = Field(default_factory=CheckoutSnapshotDTO)


class ShippingNextStep(BaseModel):
    is_billing_same_as_shipping: bool = True


class SignOut(BaseModel):
    is_cart_empty: bool = False


class CustomerView(BaseModel):
    view_type: CustomerViewType


class ReportError(BaseModel):
    type: str = "Error"
    message: str
    unhandled: bool = True


class NewsletterSubscription(BaseModel):
    subscribed: bool


class WalletButtonClick(BaseModel):
    method_name: str


# Responses

class StepStatusView(BaseModel):
    type: str
    is_active: bool
    is_complete: bool
    is_editable: bool
    is_required: bool
    is_busy: bool


class RedirectView(BaseModel):
    url: str
    mode: str


class CheckoutSessionView(BaseModel):
    id: str
    steps: list[StepStatusView]
    state: dict[str, Any]
    is_payment_step_active: bool
    redirect: Optional[RedirectView] = None
    embedded_messages: list[dict[str, Any]] = Field(default_factory=list)
