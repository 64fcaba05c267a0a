import json

import httpx
import pytest

from application.dtos.payments import PortalAddress, PortalInitiateRequest, PortalProduct
from core.settings import PortalSettings
from infrastructure.external.payments.exceptions import PaymentProviderError, PortalResponseError
from infrastructure.external.payments.portal_client import PaymentPortalClient


def _request() -> PortalInitiateRequest:
    return PortalInitiateRequest(
        address=PortalAddress(address1="1 Dell Way", city="Round Rock", state="TX", country="US", zipCode="78682"),
        buid="11",
        country="US",
        region="US",
        currency="USD",
        successUrl="https://shop.example.com/checkout/order-confirmation",
        cancelUrl="https://shop.example.com/checkout",
        clientSessionId="cart-123",
        orderDescription="Order for Jane Doe",
        amount="120.50",
        segment="dhs",
        language="EN",
        salesChannel="US_19",
        companyNumber="14",
        products=[PortalProduct(productDescription="Latitude 7440", quantity="1", productAmount="120.50")],
        paymentMode="Initial",
        orderNumber="1700000000000.11",
    )


def _portal(handler, **settings) -> PaymentPortalClient:
    portal = PortalSettings(base_url="https://portal.test", initiate_path="/initiate", **settings)
    return PaymentPortalClient(portal, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_initiate_posts_nested_json_with_api_key_headers():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"redirectUrl": "https://portal.test/pay/xyz"})

    client = _portal(handler, sp_api_key="sp-key", api_key="api-key")
    url = await client.initiate(_request())
    await client.aclose()

    assert url == "https://portal.test/pay/xyz"
    assert seen["url"] == "https://portal.test/initiate"
    assert seen["headers"]["SPApiKey"] == "sp-key"
    assert seen["headers"]["ApiKey"] == "api-key"
    assert seen["body"]["address"]["phoneNumber"] == "N/A"
    assert seen["body"]["products"][0]["quantity"] == "1"
    assert seen["body"]["orderNumber"] == "1700000000000.11"


@pytest.mark.asyncio
async def test_initiate_accepts_payment_url_and_skips_unset_keys():
    seen = {}

    def handler(request: httpx.Request):
        seen["headers"] = request.headers
        return httpx.Response(200, json={"data": {"paymentUrl": "https://portal.test/p/1"}})

    client = _portal(handler)
    assert await client.initiate(_request()) == "https://portal.test/p/1"
    assert "SPApiKey" not in seen["headers"]
    assert "ApiKey" not in seen["headers"]
    await client.aclose()


@pytest.mark.asyncio
async def test_unexpected_response_shape_raises():
    client = _portal(lambda request: httpx.Response(200, json={"status": "Initiated"}))
    with pytest.raises(PortalResponseError) as exc:
        await client.initiate(_request())
    assert exc.value.message == "Unexpected response structure"
    await client.aclose()


@pytest.mark.asyncio
async def test_non_json_response_raises():
    client = _portal(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
    with pytest.raises(PortalResponseError):
        await client.initiate(_request())
    await client.aclose()


@pytest.mark.asyncio
async def test_portal_rejection_raises_provider_error():
    client = _portal(lambda request: httpx.Response(400, json={"message": "Invalid buid"}))
    with pytest.raises(PaymentProviderError) as exc:
        await client.initiate(_request())
    assert exc.value.message == "Invalid buid"
    await client.aclose()
