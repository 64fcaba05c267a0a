"""
Application service for the extension's payment endpoints.

Depends only on the PaymentProcessor port and DTOs. Processor
implementations come from infrastructure and are injected by the
composition root (API routes), keeping dependencies one-way.
"""
from __future__ import annotations

import time

from application.dtos.payments import ProcessPaymentRequest, ProcessPaymentResult
from application.ports.payment_gateway import PaymentProcessor
from core.logging_config import get_logger
from domain.common.exceptions import DomainValidationException


logger = get_logger(__name__)


class PaymentService:
    def __init__(self, processor: PaymentProcessor) -> None:
        self.processor = processor

    async def process_payment(self, req: ProcessPaymentRequest) -> ProcessPaymentResult:
        if not req.is_complete:
            raise DomainValidationException("Missing required fields")
        logger.info(
            "payment_process_request",
            order_id=req.order_id,
            processor=self.processor.provider,
            context=req.context,
        )
        transaction = await self.processor.process_payment(req)
        logger.info(
            "payment_processed",
            order_id=req.order_id,
            transaction_id=transaction.id,
            processor_status=transaction.status,
        )
        return ProcessPaymentResult(
            transaction_id=transaction.id,
            amount=req.payment_data.amount,
            currency=req.payment_data.currency,
        )

    @staticmethod
    def process_test_payment(req: ProcessPaymentRequest) -> ProcessPaymentResult:
        """Canned success for integration testing; never reaches a processor."""
        data = req.payment_data
        return ProcessPaymentResult(
            transaction_id=f"TEST_{int(time.time() * 1000)}",
            amount=data.amount if data else None,
            currency=data.currency if data else None,
        )

    async def aclose(self) -> None:
        close = getattr(self.processor, "aclose", None)
        if callable(close):
            await close()
