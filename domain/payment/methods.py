"""
Payment method hooks: initialize / validate / submit.

Each method owns a small state object and follows the same lifecycle the
storefront drives: initialize (describe the form), capture (shopper input),
validate, submit. Methods are created per request; nothing is shared between
shoppers.
"""
from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Any, Optional

from domain.common.exceptions import (
    PaymentContainerNotFound,
    PaymentSubmissionError,
    PaymentValidationError,
)


@dataclass
class PaymentFormField:
    """An input the payment step renders into its container."""

    id: str
    label: str
    placeholder: str = ""
    required: bool = True
    input_type: str = "text"


@dataclass
class PaymentMethodState:
    method: str
    customer_id: Optional[str] = None
    payment_data: Any = None
    method_id: Optional[str] = None
    gateway: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None or k == "payment_data"}


class PaymentMethod(ABC):
    """Base class for payment methods registered with the checkout."""

    type: str = ""
    container_id: str = ""
    container_error: str = "Payment container not found."

    def __init__(self, options: Optional[dict[str, Any]] = None) -> None:
        self.options = options or {}
        self.state = self._initial_state()

    @abstractmethod
    def _initial_state(self) -> PaymentMethodState: ...

    @abstractmethod
    def form_fields(self) -> list[PaymentFormField]: ...

    @abstractmethod
    async def initialize_payment(self, options: Optional[dict[str, Any]] = None) -> dict[str, Any]: ...

    @abstractmethod
    def capture(self, values: dict[str, Any]) -> None:
        """Record what the shopper entered in the form."""

    @abstractmethod
    async def validate_payment(self) -> None: ...

    @abstractmethod
    async def submit_payment(self) -> dict[str, Any]: ...

    def _ensure_container(self, options: Optional[dict[str, Any]]) -> None:
        opts = options if options is not None else self.options
        container = opts.get("container_id", self.container_id)
        if container != self.container_id:
            raise PaymentContainerNotFound(self.container_error, container_id=container)

    def _fields_payload(self) -> list[dict[str, Any]]:
        return [asdict(f) for f in self.form_fields()]


class CustomPaymentMethod(PaymentMethod):
    type = "custom-payment"
    container_id = "checkout-payment-container"

    def _initial_state(self) -> PaymentMethodState:
        return PaymentMethodState(method="custom-payment")

    def form_fields(self) -> list[PaymentFormField]:
        return [
            PaymentFormField(
                id="payment_details",
                label="Payment Details",
                placeholder="Enter payment info",
            )
        ]

    async def initialize_payment(self, options: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        self._ensure_container(options)
        return {
            "type": self.type,
            "payment": self.state.to_dict(),
            "fields": self._fields_payload(),
        }

    def capture(self, values: dict[str, Any]) -> None:
        self.state.payment_data = values.get("payment_details")

    async def validate_payment(self) -> None:
        data = self.state.payment_data
        if not (isinstance(data, str) and len(data) > 0):
            raise PaymentValidationError(
                "Payment validation failed. Please enter valid payment details.",
                method_id=self.type,
            )

    async def submit_payment(self) -> dict[str, Any]:
        # Simulated round-trip to the payment API
        delay = float(self.options.get("processing_delay", 0) or 0)
        if delay > 0:
            await asyncio.sleep(delay)
        if not self.state.payment_data:
            raise PaymentSubmissionError(method_id=self.type)
        return {"type": self.type, "payment_data": self.state.payment_data}


class DellPaymentMethod(PaymentMethod):
    type = "dell-payment"
    container_id = "dell-payment-container"
    container_error = "Dell payment container not found."

    def __init__(self, options: Optional[dict[str, Any]] = None) -> None:
        super().__init__(options)
        self._values: dict[str, Any] = {}

    def _initial_state(self) -> PaymentMethodState:
        return PaymentMethodState(
            method="dell-payment",
            method_id="dell_payment",
            gateway="dell_payment_gateway",
        )

    def form_fields(self) -> list[PaymentFormField]:
        return [
            PaymentFormField(
                id="dell_account_number",
                label="Dell Account Number",
                placeholder="Enter Dell Account Number",
            ),
            PaymentFormField(
                id="dell_purchase_order",
                label="Purchase Order Number",
                placeholder="Enter PO Number",
            ),
        ]

    async def initialize_payment(self, options: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        self._ensure_container(options)
        return {
            "method_id": self.state.method_id,
            "gateway": self.state.gateway,
            "fields": self._fields_payload(),
        }

    def capture(self, values: dict[str, Any]) -> None:
        self._values = dict(values)

    async def validate_payment(self) -> None:
        account_number = self._values.get("dell_account_number")
        po_number = self._values.get("dell_purchase_order")
        if account_number and po_number:
            self.state.payment_data = {
                "account_number": account_number,
                "po_number": po_number,
            }
            return
        raise PaymentValidationError(
            "Please enter both Dell Account Number and PO Number",
            method_id=self.type,
        )

    async def submit_payment(self) -> dict[str, Any]:
        if not self.state.payment_data:
            raise PaymentSubmissionError(method_id=self.type)
        return {
            "method_id": self.state.method_id,
            "payment_data": {
                "formatted_payload": {
                    "method": self.state.method,
                    "dell_account_number": self.state.payment_data["account_number"],
                    "purchase_order_number": self.state.payment_data["po_number"],
                }
            },
        }
