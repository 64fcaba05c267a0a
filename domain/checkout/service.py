"""
Checkout step controller.

Sequences the customer / shipping / billing / payment steps for one
checkout session. The controller mutates a CheckoutState in place and never
performs IO itself: analytics, error logging and embedded-checkout messages
go through the injected collaborators, and browser redirects are recorded on
``self.redirect`` for the caller to act on.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from domain.common.exceptions import (
    BusinessException,
    CartChangedError,
    ShippingOptionExpiredError,
)

from .entity import (
    CheckoutSnapshot,
    CheckoutState,
    CheckoutStepStatus,
    CheckoutStepType,
    Consignment,
    CustomerViewType,
)
from .steps import find_step_index, get_checkout_step_statuses, has_selected_shipping_options


class AnalyticsTracker(Protocol):
    def track_checkout_begin(self) -> None: ...

    def track_step_viewed(self, step: CheckoutStepType) -> None: ...

    def track_step_completed(self, step: CheckoutStepType) -> None: ...

    def exit_checkout(self) -> None: ...

    def wallet_button_click(self, method_name: str) -> None: ...


class ErrorLogger(Protocol):
    def log(self, error: Exception) -> None: ...


class EmbeddedMessenger(Protocol):
    def post_error(self, error: Exception) -> None: ...

    def post_signed_out(self) -> None: ...


@dataclass
class Redirect:
    url: str
    # "top" replaces window.top.location.href, "assign" / "replace" mirror Location methods
    mode: str = "top"


def error_payload(error: Exception) -> dict:
    if isinstance(error, BusinessException):
        return {"type": error.error_type, "code": int(error.code), "message": error.message}
    return {"type": type(error).__name__, "code": None, "message": str(error)}


class CheckoutNavigator:
    def __init__(
        self,
        snapshot: CheckoutSnapshot,
        state: CheckoutState,
        *,
        analytics: AnalyticsTracker,
        error_logger: ErrorLogger,
        messenger: Optional[EmbeddedMessenger] = None,
    ) -> None:
        self.snapshot = snapshot
        self.state = state
        self.analytics = analytics
        self.error_logger = error_logger
        self.messenger = messenger if snapshot.is_embedded else None
        self.redirect: Optional[Redirect] = None

    @property
    def steps(self) -> list[CheckoutStepStatus]:
        return get_checkout_step_statuses(self.snapshot)

    @property
    def is_payment_step_active(self) -> bool:
        if self.state.active_step_type:
            return self.state.active_step_type is CheckoutStepType.PAYMENT
        return self.state.default_step_type is CheckoutStepType.PAYMENT

    def visible_steps(self) -> list[CheckoutStepStatus]:
        """Required steps with is_active reflecting the controller state."""
        current = self.state.active_step_type or self.state.default_step_type
        steps = [s for s in self.steps if s.is_required]
        if current is not None:
            for step in steps:
                step.is_active = step.type == current
        return steps

    # Navigation

    def navigate_to_step(self, step_type: CheckoutStepType, *, is_default: bool = False) -> None:
        steps = self.steps
        index = find_step_index(steps, step_type)
        if index < 0:
            return
        if self.state.active_step_type == step_type:
            return

        if is_default:
            self.state.default_step_type = step_type
        else:
            self.state.active_step_type = step_type

        if self.state.error:
            self.state.error = None

    def navigate_to_next_incomplete_step(self, *, is_default: bool = False) -> None:
        steps = self.steps
        active_index = next((i for i, s in enumerate(steps) if s.is_active), -1)
        if active_index < 0:
            return

        previous = steps[max(active_index - 1, 0)]
        self.analytics.track_step_completed(previous.type)

        self.navigate_to_step(steps[active_index].type, is_default=is_default)

    def handle_begin(self) -> None:
        """Apply store settings to a fresh session and land on its default step."""
        snapshot = self.snapshot
        self.analytics.track_checkout_begin()

        self.state.is_billing_same_as_shipping = snapshot.billing_same_as_shipping_enabled
        self.state.is_subscribed = snapshot.default_newsletter_signup
        if snapshot.has_multi_shipping_enabled and snapshot.cart is not None and len(snapshot.consignments) > 1:
            self.state.is_multi_shipping_mode = True

        self.handle_ready()

        # Set after navigation, which clears errors
        if snapshot.error_flash_messages:
            flash = snapshot.error_flash_messages[0]
            self.state.error = {"type": "FlashMessage", "code": None, "message": flash.message, "title": flash.title}

    def handle_ready(self) -> None:
        self.navigate_to_next_incomplete_step(is_default=True)

    def handle_edit_step(self, step_type: CheckoutStepType) -> None:
        self.navigate_to_step(step_type)

    def handle_expanded(self, step_type: CheckoutStepType) -> None:
        self.analytics.track_step_viewed(step_type)

    def handle_shipping_next_step(self, is_billing_same_as_shipping: bool) -> None:
        self.state.is_billing_same_as_shipping = is_billing_same_as_shipping
        if is_billing_same_as_shipping:
            self.navigate_to_next_incomplete_step()
        else:
            self.navigate_to_step(CheckoutStepType.BILLING)

    def handle_consignments_updated(self, consignments: list[Consignment]) -> None:
        previously_selected = self.state.has_selected_shipping_options
        now_selected = has_selected_shipping_options(consignments or [])

        active = self.state.active_step_type
        is_default_step_payment_or_billing = active is None and self.state.default_step_type in (
            CheckoutStepType.PAYMENT,
            CheckoutStepType.BILLING,
        )
        steps = self.steps
        is_shipping_step_finished = (
            find_step_index(steps, CheckoutStepType.SHIPPING) < find_step_index(steps, active)
            or is_default_step_payment_or_billing
        )

        if previously_selected and not now_selected and is_shipping_step_finished:
            self.navigate_to_step(CheckoutStepType.SHIPPING)
            self.state.error = error_payload(ShippingOptionExpiredError())

        self.state.has_selected_shipping_options = now_selected

    # Errors

    def handle_error(self, error: Exception) -> None:
        if isinstance(error, CartChangedError):
            self.navigate_to_step(CheckoutStepType.SHIPPING)
            return

        self.error_logger.log(error)

        if self.messenger is not None:
            self.messenger.post_error(error)

    def handle_unhandled_error(self, error: Exception) -> None:
        self.handle_error(error)
        # Shown to the shopper in the generic error modal
        self.state.error = error_payload(error)

    def handle_close_error_modal(self) -> None:
        self.state.error = None

    # Customer

    def handle_sign_out(self, *, is_cart_empty: bool) -> None:
        snapshot = self.snapshot
        if snapshot.is_price_hidden_from_guests:
            self.redirect = Redirect(snapshot.cart_url, mode="top")
            return

        if self.messenger is not None:
            self.messenger.post_signed_out()

        if snapshot.is_guest_enabled:
            self.set_customer_view_type(CustomerViewType.GUEST)

        if is_cart_empty:
            self.state.is_cart_empty = True
            if not snapshot.is_embedded:
                self.redirect = Redirect(snapshot.login_url, mode="assign")
                return

        self.navigate_to_step(CheckoutStepType.CUSTOMER)

    def set_customer_view_type(self, view_type: CustomerViewType) -> None:
        if view_type is CustomerViewType.CREATE_ACCOUNT and self.snapshot.is_embedded:
            self.redirect = Redirect(self.snapshot.create_account_url, mode="replace")
            return

        self.navigate_to_step(CheckoutStepType.CUSTOMER)
        self.state.customer_view_type = view_type

    def handle_shipping_sign_in(self) -> None:
        self.set_customer_view_type(CustomerViewType.LOGIN)

    def handle_shipping_create_account(self) -> None:
        self.set_customer_view_type(CustomerViewType.CREATE_ACCOUNT)

    # Misc toggles

    def handle_toggle_multi_shipping(self) -> None:
        self.state.is_multi_shipping_mode = not self.state.is_multi_shipping_mode

    def handle_newsletter_subscription(self, subscribed: bool) -> None:
        self.state.is_subscribed = subscribed

    def handle_before_exit(self) -> None:
        self.analytics.exit_checkout()

    def handle_wallet_button_click(self, method_name: str) -> None:
        self.analytics.wallet_button_click(method_name)
