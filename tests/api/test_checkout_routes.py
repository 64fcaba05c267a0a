import pytest

from infrastructure.external.payments.exceptions import PaymentProviderError


async def _create(client, snapshot_payload) -> dict:
    resp = await client.post("/api/v1/checkouts", json={"snapshot": snapshot_payload})
    assert resp.status_code == 200
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_create_and_navigate(client_factory, snapshot_payload):
    async with client_factory() as client:
        session = await _create(client, snapshot_payload)
        assert session["is_payment_step_active"] is True

        resp = await client.post(f"/api/v1/checkouts/{session['id']}/steps/billing/edit")
        data = resp.json()["data"]
        assert data["state"]["active_step_type"] == "billing"
        assert [s["type"] for s in data["steps"] if s["is_active"]] == ["billing"]

        resp = await client.post(f"/api/v1/checkouts/{session['id']}/steps/next")
        assert resp.json()["data"]["state"]["active_step_type"] == "payment"


@pytest.mark.asyncio
async def test_unknown_session_is_404(client_factory):
    async with client_factory() as client:
        resp = await client.get("/api/v1/checkouts/missing")
    assert resp.status_code == 404
    assert resp.json()["error"]["type"] == "CheckoutSessionNotFound"


@pytest.mark.asyncio
async def test_invalid_step_type_is_422(client_factory, snapshot_payload):
    async with client_factory() as client:
        session = await _create(client, snapshot_payload)
        resp = await client.post(f"/api/v1/checkouts/{session['id']}/steps/gift-wrap/edit")
    assert resp.status_code == 422
    assert resp.json()["error"]["type"] == "ValidationError"


@pytest.mark.asyncio
async def test_error_modal_lifecycle(client_factory, snapshot_payload):
    async with client_factory() as client:
        session = await _create(client, snapshot_payload)
        url = f"/api/v1/checkouts/{session['id']}/errors"

        resp = await client.post(url, json={"type": "OrderFinalizationError", "message": "try again"})
        assert resp.json()["data"]["state"]["error"]["message"] == "try again"

        resp = await client.delete(url)
        assert resp.json()["data"]["state"]["error"] is None


@pytest.mark.asyncio
async def test_sign_out_redirect(client_factory, snapshot_payload):
    async with client_factory() as client:
        session = await _create(client, snapshot_payload)
        resp = await client.post(f"/api/v1/checkouts/{session['id']}/sign-out", json={"is_cart_empty": True})
    data = resp.json()["data"]
    assert data["redirect"] == {"url": "/login.php", "mode": "assign"}
    assert data["state"]["customer_view_type"] == "guest"


@pytest.mark.asyncio
async def test_customer_view_and_toggles(client_factory, snapshot_payload):
    async with client_factory() as client:
        session = await _create(client, snapshot_payload)
        base = f"/api/v1/checkouts/{session['id']}"
        await client.put(f"{base}/customer-view", json={"view_type": "suggested_login"})
        await client.put(f"{base}/newsletter", json={"subscribed": True})
        resp = await client.post(f"{base}/multi-shipping/toggle")
    state = resp.json()["data"]["state"]
    assert state["customer_view_type"] == "suggested_login"
    assert state["active_step_type"] == "customer"
    assert state["is_subscribed"] is True
    assert state["is_multi_shipping_mode"] is True


@pytest.mark.asyncio
async def test_payment_submission_returns_portal_url(client_factory, stub_portal, snapshot_payload):
    async with client_factory() as client:
        session = await _create(client, snapshot_payload)
        resp = await client.post(
            f"/api/v1/checkouts/{session['id']}/payment",
            json={"method_id": "custom-payment", "values": {"payment_details": "PO on file"}},
        )
    data = resp.json()["data"]
    assert resp.status_code == 200
    assert data["redirect_url"] == stub_portal.redirect_url
    assert data["payment"] == {"type": "custom-payment", "payment_data": "PO on file"}
    assert stub_portal.requests[0].clientSessionId == "cart-123"


@pytest.mark.asyncio
async def test_portal_transport_failure_is_502(client_factory, stub_portal, snapshot_payload):
    stub_portal.error = PaymentProviderError("Network error: refused", provider="stub-portal")
    async with client_factory() as client:
        session = await _create(client, snapshot_payload)
        resp = await client.post(f"/api/v1/checkouts/{session['id']}/portal-redirect")
        assert resp.status_code == 502
        resp = await client.get(f"/api/v1/checkouts/{session['id']}")
    assert resp.json()["data"]["state"]["error"]["type"] == "PaymentProviderError"


@pytest.mark.asyncio
async def test_missing_order_details_is_409(client_factory, snapshot_payload):
    snapshot_payload["consignments"] = []
    async with client_factory() as client:
        session = await _create(client, snapshot_payload)
        resp = await client.post(f"/api/v1/checkouts/{session['id']}/portal-redirect")
    assert resp.status_code == 409
    assert resp.json()["error"]["details"] == {"missing": ["consignments"]}


@pytest.mark.asyncio
async def test_portal_form_page(client_factory, snapshot_payload):
    snapshot_payload["billing_address"]["first_name"] = '<script>"x"</script>'
    async with client_factory() as client:
        session = await _create(client, snapshot_payload)
        resp = await client.get(f"/api/v1/checkouts/{session['id']}/portal-form")
    page = resp.text
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert 'form method="POST" action="https://apigtwb2cnp.us.dell.com/' in page
    assert 'name="clientSessionId" value="cart-123"' in page
    assert "<script>" not in page
    assert "SPApiKey" not in page


@pytest.mark.asyncio
async def test_delete_session(client_factory, snapshot_payload):
    async with client_factory() as client:
        session = await _create(client, snapshot_payload)
        resp = await client.delete(f"/api/v1/checkouts/{session['id']}")
        assert resp.status_code == 200
        resp = await client.get(f"/api/v1/checkouts/{session['id']}")
    assert resp.status_code == 404
