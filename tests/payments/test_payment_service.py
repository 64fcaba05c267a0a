import pytest

from application.dtos.payments import ProcessPaymentRequest, ProcessorTransaction
from application.services.payment_service import PaymentService
from domain.common.exceptions import DomainValidationException
from infrastructure.external.payments import get_payment_processor
from infrastructure.external.payments.simulated_processor import SimulatedPaymentProcessor


class StubProcessor:
    provider = "stub"

    def __init__(self):
        self.requests = []

    async def process_payment(self, req):
        self.requests.append(req)
        return ProcessorTransaction(id="txn_1")


def _request(**overrides):
    data = {
        "payment_data": {"amount": "49.99", "currency": "usd"},
        "order_id": "1001",
        "context": "stores/abc",
    }
    data.update(overrides)
    return ProcessPaymentRequest.model_validate(data)


@pytest.mark.asyncio
async def test_process_payment_echoes_amount_and_currency():
    processor = StubProcessor()
    result = await PaymentService(processor).process_payment(_request())
    assert result.status == "success"
    assert result.transaction_id == "txn_1"
    assert result.amount == "49.99"
    assert result.currency == "usd"
    assert result.timestamp.endswith("Z")
    assert processor.requests[0].order_id == "1001"


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["payment_data", "order_id"])
async def test_process_payment_requires_fields(missing):
    processor = StubProcessor()
    with pytest.raises(DomainValidationException) as exc:
        await PaymentService(processor).process_payment(_request(**{missing: None}))
    assert exc.value.message == "Missing required fields"
    assert processor.requests == []


def test_test_payment_never_reaches_processor():
    result = PaymentService.process_test_payment(_request())
    assert result.transaction_id.startswith("TEST_")
    assert result.transaction_id[len("TEST_"):].isdigit()


@pytest.mark.asyncio
async def test_simulated_processor_approves():
    processor = get_payment_processor("simulated")
    assert isinstance(processor, SimulatedPaymentProcessor)
    txn = await processor.process_payment(_request())
    assert txn.id.startswith("txn_")
    assert txn.status == "success"


def test_unknown_processor_is_rejected():
    with pytest.raises(ValueError):
        get_payment_processor("bitpay")
