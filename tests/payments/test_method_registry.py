import pytest

from application.services.payment_method_service import (
    PaymentMethodRegistry,
    PaymentMethodService,
    build_default_registry,
)
from domain.common.exceptions import PaymentMethodNotFound, PaymentValidationError
from domain.payment.methods import CustomPaymentMethod, DellPaymentMethod


def test_default_registry_lists_both_methods():
    registry = build_default_registry()
    assert [(m.id, m.type) for m in registry.list()] == [
        ("custom-payment", "custom-payment"),
        ("dell-payment", "dell-payment"),
    ]
    assert isinstance(registry.create("dell-payment"), DellPaymentMethod)


def test_unknown_method_raises_not_found():
    with pytest.raises(PaymentMethodNotFound) as exc:
        build_default_registry().get("paypal")
    assert exc.value.format_params == {"method_id": "paypal"}


def test_registering_same_id_replaces_entry():
    registry = PaymentMethodRegistry()
    registry.register("custom-payment", "custom-payment", CustomPaymentMethod)
    registry.register("custom-payment", "dell-payment", DellPaymentMethod)
    assert len(registry.list()) == 1
    assert isinstance(registry.create("custom-payment"), DellPaymentMethod)


@pytest.mark.asyncio
async def test_service_submit_runs_full_lifecycle():
    service = PaymentMethodService(build_default_registry())
    result = await service.submit("custom-payment", {"payment_details": "wire transfer"})
    assert result == {"type": "custom-payment", "payment_data": "wire transfer"}


@pytest.mark.asyncio
async def test_service_submit_stops_at_validation():
    service = PaymentMethodService(build_default_registry())
    with pytest.raises(PaymentValidationError):
        await service.submit("dell-payment", {"dell_account_number": "ACC-1"})


def test_processing_delay_is_passed_to_custom_method():
    registry = build_default_registry(processing_delay=1.5)
    assert registry.create("custom-payment").options["processing_delay"] == 1.5
    # Per-request options win over the registry default
    assert registry.create("custom-payment", {"processing_delay": 0}).options["processing_delay"] == 0
