"""Domain-level business exceptions shared by domain and infrastructure.

The core layer only maps these to HTTP responses; the domain never imports
from core.
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode
from shared.codes.payment_codes import PaymentCode


class BusinessException(Exception):
    """Base class for business errors"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
        message_key: Optional[str] = None,
        format_params: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        self.message_key = message_key
        self.format_params = format_params
        super().__init__(self.message)


class DomainValidationException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
        message_key: str | None = None,
        format_params: dict | None = None,
    ):
        super().__init__(
            code=BusinessCode.PARAM_VALIDATION_ERROR,
            message=message,
            error_type="DomainValidationError",
            details=details,
            field=field,
            message_key=message_key,
            format_params=format_params,
        )


# Payment method hooks

class PaymentMethodNotFound(BusinessException):
    def __init__(self, method_id: str):
        super().__init__(
            code=PaymentCode.METHOD_NOT_FOUND,
            message=f"Payment method {method_id} is not registered",
            error_type="PaymentMethodNotFound",
            details={"method_id": method_id},
            field="method_id",
            message_key="payments.method.not_found",
            format_params={"method_id": method_id},
        )


class PaymentContainerNotFound(BusinessException):
    def __init__(self, message: str = "Payment container not found.", *, container_id: str | None = None):
        super().__init__(
            code=PaymentCode.CONTAINER_NOT_FOUND,
            message=message,
            error_type="PaymentContainerNotFound",
            details={"container_id": container_id} if container_id else None,
        )


class PaymentValidationError(BusinessException):
    def __init__(self, message: str, *, method_id: str | None = None):
        super().__init__(
            code=PaymentCode.VALIDATION_FAILED,
            message=message,
            error_type="PaymentValidationError",
            details={"method_id": method_id} if method_id else None,
        )


class PaymentSubmissionError(BusinessException):
    def __init__(
        self,
        message: str = "Payment submission failed. No payment data provided.",
        *,
        method_id: str | None = None,
    ):
        super().__init__(
            code=PaymentCode.SUBMISSION_FAILED,
            message=message,
            error_type="PaymentSubmissionError",
            details={"method_id": method_id} if method_id else None,
        )


# Checkout flow

class CheckoutSessionNotFound(BusinessException):
    def __init__(self, session_id: str):
        super().__init__(
            code=BusinessCode.CHECKOUT_SESSION_NOT_FOUND,
            message="Checkout session not found",
            error_type="CheckoutSessionNotFound",
            details={"session_id": session_id},
            message_key="checkout.session.not_found",
        )


class MissingOrderDetails(BusinessException):
    def __init__(self, missing: list[str]):
        super().__init__(
            code=BusinessCode.MISSING_ORDER_DETAILS,
            message="Missing order details",
            error_type="MissingOrderDetails",
            details={"missing": missing},
            message_key="checkout.order_details.missing",
        )


class CartChangedError(BusinessException):
    """Raised when the cart changed underneath the shopper mid-checkout."""

    def __init__(self, message: str = "Cart has changed"):
        super().__init__(
            code=BusinessCode.CART_CHANGED,
            message=message,
            error_type="CartChangedError",
            message_key="checkout.cart.changed",
        )


class ShippingOptionExpiredError(BusinessException):
    def __init__(self):
        super().__init__(
            code=BusinessCode.SHIPPING_OPTION_EXPIRED,
            message="The selected shipping option is no longer available",
            error_type="ShippingOptionExpiredError",
            message_key="checkout.shipping_option.expired",
        )
