"""
Build the payment portal initiate request from a checkout snapshot.
"""
from __future__ import annotations

import json
import time
from typing import Any, Optional

from application.dtos.payments import PortalAddress, PortalInitiateRequest, PortalProduct
from core.settings import PortalSettings
from domain.checkout.entity import CheckoutSnapshot
from domain.common.exceptions import MissingOrderDetails


def missing_order_details(snapshot: CheckoutSnapshot) -> list[str]:
    missing = []
    if snapshot.cart is None:
        missing.append("cart")
    if snapshot.billing_address is None:
        missing.append("billing_address")
    if not snapshot.consignments:
        missing.append("consignments")
    return missing


def _decimal_str(value: Any) -> str:
    return format(value, "f") if value is not None else ""


def build_portal_request(
    snapshot: CheckoutSnapshot,
    portal: PortalSettings,
    *,
    origin: str,
    now_ms: Optional[int] = None,
) -> PortalInitiateRequest:
    missing = missing_order_details(snapshot)
    if missing:
        raise MissingOrderDetails(missing)

    cart = snapshot.cart
    billing = snapshot.billing_address
    origin = origin.rstrip("/")
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)

    return PortalInitiateRequest(
        address=PortalAddress(
            address1=billing.address1,
            address2=billing.address2 or "",
            city=billing.city,
            state=billing.state_or_province_code,
            country=billing.country_code,
            zipCode=billing.postal_code,
            phoneNumber=billing.phone or "N/A",
        ),
        buid=portal.buid,
        country=portal.country,
        region=portal.region,
        currency=cart.currency_code,
        successUrl=origin + portal.success_path,
        cancelUrl=origin + portal.cancel_path,
        clientSessionId=cart.id,
        orderDescription=f"Order for {billing.first_name} {billing.last_name}",
        amount=_decimal_str(cart.cart_amount),
        segment=portal.segment,
        language=portal.language,
        salesChannel=portal.sales_channel,
        companyNumber=portal.company_number,
        products=[
            PortalProduct(
                productDescription=item.name,
                quantity=str(item.quantity),
                productAmount=_decimal_str(item.extended_list_price),
            )
            for item in cart.physical_items
        ],
        paymentMode=portal.payment_mode,
        orderNumber=f"{stamp}.{portal.buid}",
    )


def portal_form_fields(req: PortalInitiateRequest) -> list[tuple[str, str]]:
    """Flatten the request into hidden form inputs.

    Strings are posted as-is, nested values as JSON.
    """
    fields = []
    for key, value in req.model_dump(mode="json").items():
        fields.append((key, value if isinstance(value, str) else json.dumps(value)))
    return fields
