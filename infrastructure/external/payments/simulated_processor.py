"""
In-house payment processor used until a real provider is wired in.

Approves every payment and issues a random transaction id.
"""
from __future__ import annotations

import asyncio
import uuid

from application.dtos.payments import ProcessPaymentRequest, ProcessorTransaction
from core.settings import payment_settings
from infrastructure.external.payments.base import BasePaymentClient


class SimulatedPaymentProcessor(BasePaymentClient):
    provider = "simulated"

    def __init__(self, delay_ms: int | None = None):
        super().__init__()
        self.delay_ms = payment_settings.simulated_delay_ms if delay_ms is None else delay_ms

    async def process_payment(self, req: ProcessPaymentRequest) -> ProcessorTransaction:
        if self.delay_ms > 0:
            await asyncio.sleep(self.delay_ms / 1000)
        transaction = ProcessorTransaction(id=f"txn_{uuid.uuid4().hex}", status=self._map_status("approved"))
        self._log("simulated_payment_approved", order_id=req.order_id, transaction_id=transaction.id)
        return transaction
