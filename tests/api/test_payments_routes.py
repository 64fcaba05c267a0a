import pytest


@pytest.mark.asyncio
async def test_list_methods(client_factory):
    async with client_factory() as client:
        resp = await client.get("/api/v1/payments/methods")
    body = resp.json()
    assert resp.status_code == 200
    assert body["code"] == 0
    assert [m["id"] for m in body["data"]] == ["custom-payment", "dell-payment"]


@pytest.mark.asyncio
async def test_initialize_unknown_method_is_404(client_factory):
    async with client_factory() as client:
        resp = await client.post("/api/v1/payments/methods/paypal/initialize", json={})
    body = resp.json()
    assert resp.status_code == 404
    assert body["error"]["type"] == "PaymentMethodNotFound"
    assert body["message"] == "Payment method paypal is not registered"


@pytest.mark.asyncio
async def test_initialize_wrong_container(client_factory):
    async with client_factory() as client:
        resp = await client.post(
            "/api/v1/payments/methods/dell-payment/initialize", json={"container_id": "checkout-payment-container"}
        )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Dell payment container not found."


@pytest.mark.asyncio
async def test_submit_validation_failure_is_422(client_factory):
    async with client_factory() as client:
        resp = await client.post(
            "/api/v1/payments/methods/submit",
            json={"method_id": "dell-payment", "values": {"dell_account_number": "ACC-1"}},
        )
    body = resp.json()
    assert resp.status_code == 422
    assert body["message"] == "Please enter both Dell Account Number and PO Number"
    assert resp.headers["X-Request-ID"] == body["error"]["request_id"]


@pytest.mark.asyncio
async def test_submit_custom_payment(client_factory):
    async with client_factory() as client:
        resp = await client.post(
            "/api/v1/payments/methods/submit",
            json={"method_id": "custom-payment", "values": {"payment_details": "net 30"}},
        )
    assert resp.status_code == 200
    assert resp.json()["data"] == {"type": "custom-payment", "payment_data": "net 30"}


@pytest.mark.asyncio
async def test_initiate_portal_payment(client_factory, stub_portal):
    body = {
        "address": {"address1": "1 Dell Way", "country": "US"},
        "buid": "11",
        "country": "US",
        "region": "US",
        "currency": "USD",
        "successUrl": "https://shop.example.com/checkout/order-confirmation",
        "cancelUrl": "https://shop.example.com/checkout",
        "clientSessionId": "cart-9",
        "orderDescription": "Order for Jane Doe",
        "amount": "10.00",
        "segment": "dhs",
        "language": "EN",
        "salesChannel": "US_19",
        "companyNumber": "14",
        "paymentMode": "Initial",
        "orderNumber": "1700000000000.11",
    }
    async with client_factory() as client:
        resp = await client.post("/api/v1/payments", json=body)
    assert resp.status_code == 200
    assert resp.json()["data"] == {"redirect_url": stub_portal.redirect_url, "order_number": "1700000000000.11"}
    assert stub_portal.requests[0].address.phoneNumber == "N/A"
