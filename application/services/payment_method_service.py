"""
Payment method registration and the initialize/validate/submit lifecycle.

The registry plays the role of ``checkout.registerPaymentMethod`` on the
storefront: each entry maps a method id to a factory that builds a fresh
PaymentMethod for one request.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from application.dtos.payments import RegisteredPaymentMethod
from core.logging_config import get_logger
from domain.common.exceptions import PaymentMethodNotFound
from domain.payment.methods import CustomPaymentMethod, DellPaymentMethod, PaymentMethod


logger = get_logger(__name__)

PaymentMethodFactory = Callable[[Optional[dict[str, Any]]], PaymentMethod]


@dataclass(frozen=True)
class PaymentMethodRegistration:
    id: str
    type: str
    factory: PaymentMethodFactory


class PaymentMethodRegistry:
    def __init__(self) -> None:
        self._methods: dict[str, PaymentMethodRegistration] = {}

    def register(self, id: str, type: str, factory: PaymentMethodFactory) -> None:
        if id in self._methods:
            logger.warning("payment_method_replaced", method_id=id)
        self._methods[id] = PaymentMethodRegistration(id=id, type=type, factory=factory)
        logger.info("payment_method_registered", method_id=id, method_type=type)

    def get(self, id: str) -> PaymentMethodRegistration:
        try:
            return self._methods[id]
        except KeyError:
            raise PaymentMethodNotFound(id) from None

    def create(self, id: str, options: Optional[dict[str, Any]] = None) -> PaymentMethod:
        return self.get(id).factory(options)

    def list(self) -> list[RegisteredPaymentMethod]:
        return [RegisteredPaymentMethod(id=m.id, type=m.type) for m in self._methods.values()]


def build_default_registry(*, processing_delay: float = 0.0) -> PaymentMethodRegistry:
    registry = PaymentMethodRegistry()

    def _custom(options: Optional[dict[str, Any]]) -> PaymentMethod:
        opts = {"processing_delay": processing_delay, **(options or {})}
        return CustomPaymentMethod(opts)

    registry.register("custom-payment", "custom-payment", _custom)
    registry.register("dell-payment", "dell-payment", DellPaymentMethod)
    return registry


class PaymentMethodService:
    def __init__(self, registry: PaymentMethodRegistry) -> None:
        self.registry = registry

    def list_methods(self) -> list[RegisteredPaymentMethod]:
        return self.registry.list()

    async def initialize(self, method_id: str, options: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        logger.info("payment_method_initializing", method_id=method_id)
        method = self.registry.create(method_id, options)
        return await method.initialize_payment(options)

    async def submit(
        self,
        method_id: str,
        values: dict[str, Any],
        *,
        container_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """Run initialize -> capture -> validate -> submit for one payment."""
        options = {"container_id": container_id} if container_id else None
        method = self.registry.create(method_id, options)
        await method.initialize_payment(options)
        method.capture(values)
        logger.info("payment_method_validating", method_id=method_id)
        await method.validate_payment()
        result = await method.submit_payment()
        logger.info("payment_method_submitted", method_id=method_id)
        return result
