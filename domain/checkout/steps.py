"""
Derive checkout step statuses from an order snapshot.
"""
from __future__ import annotations

from typing import Optional

from .entity import CheckoutSnapshot, CheckoutStepStatus, CheckoutStepType, Consignment


STEP_ORDER: tuple[CheckoutStepType, ...] = tuple(CheckoutStepType)


def has_selected_shipping_options(consignments: list[Consignment]) -> bool:
    if not consignments:
        return False
    return all(c.selected_shipping_option_id for c in consignments)


def _is_shipping_required(snapshot: CheckoutSnapshot) -> bool:
    return bool(snapshot.cart and snapshot.cart.physical_items)


def _is_complete(step: CheckoutStepType, snapshot: CheckoutSnapshot) -> bool:
    if step is CheckoutStepType.CUSTOMER:
        return bool(snapshot.customer.email)
    if step is CheckoutStepType.SHIPPING:
        consignments = snapshot.consignments
        return bool(consignments) and all(
            c.shipping_address is not None and c.shipping_address.is_complete for c in consignments
        ) and has_selected_shipping_options(consignments)
    if step is CheckoutStepType.BILLING:
        return bool(snapshot.billing_address and snapshot.billing_address.is_complete)
    # payment completes only when the order is placed
    return False


def get_checkout_step_statuses(snapshot: CheckoutSnapshot) -> list[CheckoutStepStatus]:
    """Build required step statuses; the first incomplete one is active.

    When every step is complete the last required step stays active.
    """
    statuses: list[CheckoutStepStatus] = []
    for step in STEP_ORDER:
        if step is CheckoutStepType.SHIPPING and not _is_shipping_required(snapshot):
            continue
        complete = _is_complete(step, snapshot)
        statuses.append(
            CheckoutStepStatus(
                type=step,
                is_complete=complete,
                is_editable=complete and step is not CheckoutStepType.PAYMENT,
                is_required=True,
            )
        )

    active: Optional[CheckoutStepStatus] = next((s for s in statuses if not s.is_complete), None)
    if active is None and statuses:
        active = statuses[-1]
    if active is not None:
        active.is_active = True
    return statuses


def find_step_index(steps: list[CheckoutStepStatus], step_type: Optional[CheckoutStepType]) -> int:
    for index, step in enumerate(steps):
        if step.type == step_type:
            return index
    return -1
