"""
Checkout domain entities - steps, order snapshot and controller state.
"""
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class CheckoutStepType(str, Enum):
    """Checkout steps, declared in the order the shopper walks them."""
    CUSTOMER = "customer"
    SHIPPING = "shipping"
    BILLING = "billing"
    PAYMENT = "payment"


class CustomerViewType(str, Enum):
    GUEST = "guest"
    LOGIN = "login"
    CREATE_ACCOUNT = "create_account"
    CANCELLABLE_ENFORCED_LOGIN = "cancellable_enforced_login"
    ENFORCED_LOGIN = "enforced_login"
    SUGGESTED_LOGIN = "suggested_login"


@dataclass
class CheckoutStepStatus:
    type: CheckoutStepType
    is_active: bool = False
    is_complete: bool = False
    is_editable: bool = False
    is_required: bool = True
    is_busy: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data


@dataclass
class Address:
    first_name: str = ""
    last_name: str = ""
    address1: str = ""
    address2: Optional[str] = None
    city: str = ""
    state_or_province_code: str = ""
    country_code: str = ""
    postal_code: str = ""
    phone: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.address1 and self.country_code)


@dataclass
class LineItem:
    name: str
    quantity: int
    extended_list_price: Decimal


@dataclass
class Cart:
    id: str
    currency_code: str
    cart_amount: Decimal
    physical_items: list[LineItem] = field(default_factory=list)


@dataclass
class Consignment:
    id: str
    shipping_address: Optional[Address] = None
    selected_shipping_option_id: Optional[str] = None


@dataclass
class Customer:
    email: Optional[str] = None
    is_guest: bool = True


@dataclass
class FlashMessage:
    message: str
    title: Optional[str] = None


@dataclass
class CheckoutSnapshot:
    """What the storefront knows about the order at a point in time."""

    cart: Optional[Cart] = None
    customer: Customer = field(default_factory=Customer)
    billing_address: Optional[Address] = None
    consignments: list[Consignment] = field(default_factory=list)
    is_guest_enabled: bool = True
    is_price_hidden_from_guests: bool = False
    is_embedded: bool = False
    login_url: str = "/login.php"
    cart_url: str = "/cart.php"
    create_account_url: str = "/login.php?action=create_account"
    has_multi_shipping_enabled: bool = False
    billing_same_as_shipping_enabled: bool = True
    default_newsletter_signup: bool = False
    error_flash_messages: list[FlashMessage] = field(default_factory=list)


@dataclass
class CheckoutState:
    """Mutable controller state kept per checkout session."""

    active_step_type: Optional[CheckoutStepType] = None
    default_step_type: Optional[CheckoutStepType] = None
    customer_view_type: Optional[CustomerViewType] = None
    is_billing_same_as_shipping: bool = True
    has_selected_shipping_options: bool = False
    is_cart_empty: bool = False
    is_redirecting: bool = False
    is_subscribed: bool = False
    is_multi_shipping_mode: bool = False
    error: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in ("active_step_type", "default_step_type", "customer_view_type"):
            value = getattr(self, key)
            data[key] = value.value if value is not None else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CheckoutState":
        payload = dict(data)
        for key in ("active_step_type", "default_step_type"):
            if payload.get(key):
                payload[key] = CheckoutStepType(payload[key])
        if payload.get("customer_view_type"):
            payload["customer_view_type"] = CustomerViewType(payload["customer_view_type"])
        known = {f for f in cls.__dataclass_fields__}
        return cls(**{k: v for k, v in payload.items() if k in known})
