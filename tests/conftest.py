"""Pytest bootstrap configuration.

Pin the environment before application settings are imported, and share
the stubs the checkout and API tests build on.
"""
import os

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("CHECKOUT__SESSION_BACKEND", "memory")
os.environ.setdefault("CHECKOUT__STOREFRONT_ORIGIN", "https://shop.example.com")
os.environ.setdefault("LOG_REQUEST_BODY_ENABLE_BY_DEFAULT", "false")

import pytest


def _address(**overrides):
    data = {
        "first_name": "Jane",
        "last_name": "Doe",
        "address1": "1 Dell Way",
        "address2": None,
        "city": "Round Rock",
        "state_or_province_code": "TX",
        "country_code": "US",
        "postal_code": "78682",
        "phone": "555-0100",
    }
    data.update(overrides)
    return data


@pytest.fixture
def snapshot_payload():
    """A complete order snapshot as the storefront posts it."""
    return {
        "cart": {
            "id": "cart-123",
            "currency_code": "usd",
            "cart_amount": "120.50",
            "physical_items": [
                {"name": "Latitude 7440", "quantity": 1, "extended_list_price": "100.50"},
                {"name": "Dock WD19", "quantity": 2, "extended_list_price": "20.00"},
            ],
        },
        "customer": {"email": "jane@example.com", "is_guest": False},
        "billing_address": _address(),
        "consignments": [
            {
                "id": "con-1",
                "shipping_address": _address(),
                "selected_shipping_option_id": "ground",
            }
        ],
    }


class StubPortal:
    provider = "stub-portal"

    def __init__(self, redirect_url="https://portal.example.com/pay/abc", error=None):
        self.redirect_url = redirect_url
        self.error = error
        self.requests = []
        self.closed = False

    async def initiate(self, req):
        self.requests.append(req)
        if self.error is not None:
            raise self.error
        return self.redirect_url

    async def aclose(self):
        self.closed = True


class RecordingAnalytics:
    def __init__(self, session_id="s1"):
        self.session_id = session_id
        self.events = []

    def track_checkout_begin(self):
        self.events.append(("begin", None))

    def track_step_viewed(self, step):
        self.events.append(("viewed", step))

    def track_step_completed(self, step):
        self.events.append(("completed", step))

    def exit_checkout(self):
        self.events.append(("exit", None))

    def wallet_button_click(self, method_name):
        self.events.append(("wallet", method_name))


class RecordingErrorLogger:
    def __init__(self):
        self.errors = []

    def log(self, error):
        self.errors.append(error)


@pytest.fixture
def stub_portal():
    return StubPortal()


@pytest.fixture
def error_logger():
    return RecordingErrorLogger()


@pytest.fixture
def analytics():
    return RecordingAnalytics()
