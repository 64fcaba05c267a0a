import httpx
import pytest

from application.dtos.payments import AppCredentials
from application.services.auth_service import AppAuthService
from core.config import AppCredentialSettings
from infrastructure.external.payments.app_auth_client import AppAuthHttpClient


@pytest.mark.asyncio
async def test_auth_callback_acknowledges_without_app_credentials(client_factory):
    async with client_factory() as client:
        resp = await client.get("/auth/callback", params={"code": "abc", "scope": "s", "context": "stores/x"})
    assert resp.status_code == 200
    assert resp.text == "Authorization successful"


@pytest.mark.asyncio
async def test_auth_callback_without_code_is_rejected(client_factory):
    async with client_factory() as client:
        resp = await client.get("/auth/callback")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing authorization code"}


@pytest.mark.asyncio
async def test_auth_callback_stores_exchanged_credentials(app, client_factory):
    class StubAuthClient:
        async def exchange_code(self, *, code, scope, context):
            return AppCredentials(access_token="tok", scope=scope, context=context)

    app.state.auth_service = AppAuthService(StubAuthClient(), app.state.credential_store)
    async with client_factory() as client:
        resp = await client.get("/auth/callback", params={"code": "abc", "scope": "s", "context": "stores/x"})
    assert resp.status_code == 200
    assert (await app.state.credential_store.get("stores/x")).access_token == "tok"


@pytest.mark.asyncio
async def test_auth_callback_with_non_json_token_response_is_rejected(app, client_factory):
    auth_client = AppAuthHttpClient(
        AppCredentialSettings(client_id="client-1", client_secret="secret-1", token_url="https://login.test/oauth2/token"),
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>oops</html>")),
    )
    app.state.auth_service = AppAuthService(auth_client, app.state.credential_store)
    async with client_factory() as client:
        resp = await client.get("/auth/callback", params={"code": "abc", "context": "stores/x"})
    await auth_client.aclose()
    assert resp.status_code == 400
    assert resp.json() == {"error": "Token endpoint returned a non-JSON response"}
    assert await app.state.credential_store.get("stores/x") is None


@pytest.mark.asyncio
async def test_process_payment_success_shape(client_factory):
    body = {"payment_data": {"amount": 25.5, "currency": "USD"}, "order_id": "1001", "context": "stores/x"}
    async with client_factory() as client:
        resp = await client.post("/process-payment", json=body)
    data = resp.json()
    assert resp.status_code == 200
    assert set(data) == {"status", "transaction_id", "amount", "currency", "timestamp"}
    assert data["status"] == "success"
    assert data["transaction_id"].startswith("txn_")
    assert data["amount"] == 25.5
    assert data["currency"] == "USD"


@pytest.mark.asyncio
async def test_process_payment_accepts_numeric_order_id(client_factory):
    body = {"payment_data": {"amount": 25.5, "currency": "USD"}, "order_id": 1001}
    async with client_factory() as client:
        resp = await client.post("/process-payment", json=body)
    assert resp.status_code == 200
    assert resp.json()["status"] == "success"


@pytest.mark.asyncio
async def test_process_payment_echoes_amount_and_currency_as_sent(client_factory):
    body = {"payment_data": {"amount": 10, "currency": "usdollar"}, "order_id": "1001"}
    async with client_factory() as client:
        resp = await client.post("/process-payment", json=body)
    data = resp.json()
    assert resp.status_code == 200
    assert data["amount"] == 10
    assert data["currency"] == "usdollar"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"order_id": "1001"},
        {"payment_data": {"amount": 1, "currency": "USD"}},
    ],
)
async def test_process_payment_missing_fields(client_factory, body):
    async with client_factory() as client:
        resp = await client.post("/process-payment", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"status": "error", "message": "Missing required fields"}


@pytest.mark.asyncio
async def test_process_payment_rejects_malformed_json(client_factory):
    async with client_factory() as client:
        resp = await client.post(
            "/process-payment", content=b"{not json", headers={"content-type": "application/json"}
        )
    assert resp.status_code == 400
    assert resp.json()["status"] == "error"


@pytest.mark.asyncio
async def test_process_payment_test_returns_canned_transaction(client_factory):
    body = {"payment_data": {"amount": "10.00", "currency": "eur"}, "order_id": "1"}
    async with client_factory() as client:
        resp = await client.post("/process-payment-test", json=body)
    data = resp.json()
    assert resp.status_code == 200
    assert data["transaction_id"].startswith("TEST_")
    assert data["amount"] == "10.00"
    assert data["currency"] == "eur"
    assert data["timestamp"].endswith("Z")
