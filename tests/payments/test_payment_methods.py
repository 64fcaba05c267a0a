import pytest

from domain.common.exceptions import (
    PaymentContainerNotFound,
    PaymentSubmissionError,
    PaymentValidationError,
)
from domain.payment.methods import CustomPaymentMethod, DellPaymentMethod


@pytest.mark.asyncio
async def test_custom_initialize_describes_payment_details_field():
    method = CustomPaymentMethod()
    result = await method.initialize_payment({"container_id": "checkout-payment-container"})
    assert result["type"] == "custom-payment"
    assert result["payment"] == {"method": "custom-payment", "payment_data": None}
    assert [f["id"] for f in result["fields"]] == ["payment_details"]


@pytest.mark.asyncio
async def test_custom_initialize_rejects_unknown_container():
    method = CustomPaymentMethod()
    with pytest.raises(PaymentContainerNotFound) as exc:
        await method.initialize_payment({"container_id": "somewhere-else"})
    assert exc.value.message == "Payment container not found."


@pytest.mark.asyncio
async def test_custom_validate_requires_non_empty_details():
    method = CustomPaymentMethod()
    method.capture({"payment_details": ""})
    with pytest.raises(PaymentValidationError) as exc:
        await method.validate_payment()
    assert exc.value.message == "Payment validation failed. Please enter valid payment details."


@pytest.mark.asyncio
async def test_custom_submit_returns_captured_details():
    method = CustomPaymentMethod()
    method.capture({"payment_details": "net-30 terms"})
    await method.validate_payment()
    assert await method.submit_payment() == {"type": "custom-payment", "payment_data": "net-30 terms"}


@pytest.mark.asyncio
async def test_custom_submit_without_data_fails():
    with pytest.raises(PaymentSubmissionError) as exc:
        await CustomPaymentMethod().submit_payment()
    assert exc.value.message == "Payment submission failed. No payment data provided."


@pytest.mark.asyncio
async def test_dell_initialize_uses_own_container():
    method = DellPaymentMethod()
    result = await method.initialize_payment()
    assert result["method_id"] == "dell_payment"
    assert result["gateway"] == "dell_payment_gateway"
    assert [f["id"] for f in result["fields"]] == ["dell_account_number", "dell_purchase_order"]

    with pytest.raises(PaymentContainerNotFound) as exc:
        await DellPaymentMethod().initialize_payment({"container_id": "checkout-payment-container"})
    assert exc.value.message == "Dell payment container not found."


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "values",
    [
        {"dell_account_number": "ACC-1"},
        {"dell_purchase_order": "PO-9"},
        {"dell_account_number": "", "dell_purchase_order": "PO-9"},
    ],
)
async def test_dell_validate_requires_account_and_po(values):
    method = DellPaymentMethod()
    method.capture(values)
    with pytest.raises(PaymentValidationError) as exc:
        await method.validate_payment()
    assert exc.value.message == "Please enter both Dell Account Number and PO Number"


@pytest.mark.asyncio
async def test_dell_submit_formats_payload():
    method = DellPaymentMethod()
    method.capture({"dell_account_number": "ACC-1", "dell_purchase_order": "PO-9"})
    await method.validate_payment()
    assert method.state.payment_data == {"account_number": "ACC-1", "po_number": "PO-9"}
    assert await method.submit_payment() == {
        "method_id": "dell_payment",
        "payment_data": {
            "formatted_payload": {
                "method": "dell-payment",
                "dell_account_number": "ACC-1",
                "purchase_order_number": "PO-9",
            }
        },
    }
