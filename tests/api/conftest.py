import httpx
import pytest

from application.services.auth_service import AppAuthService
from application.services.checkout_service import CheckoutApplicationService
from application.services.payment_method_service import PaymentMethodService, build_default_registry
from application.services.payment_service import PaymentService
from core.settings import PortalSettings
from infrastructure.external.payments.simulated_processor import SimulatedPaymentProcessor
from infrastructure.sessions import InMemoryCheckoutSessionStore, InMemoryCredentialStore
from infrastructure.telemetry import LoggingAnalyticsTracker


@pytest.fixture
def app(stub_portal, error_logger):
    """The FastAPI app with services wired as the lifespan would, minus network clients."""
    from main import app

    methods = PaymentMethodService(build_default_registry())
    app.state.payment_method_service = methods
    app.state.payment_service = PaymentService(SimulatedPaymentProcessor(delay_ms=0))
    app.state.payment_portal = stub_portal
    app.state.credential_store = InMemoryCredentialStore()
    app.state.auth_service = AppAuthService(None, app.state.credential_store)
    app.state.checkout_service = CheckoutApplicationService(
        InMemoryCheckoutSessionStore(),
        analytics_factory=LoggingAnalyticsTracker,
        error_logger=error_logger,
        methods=methods,
        portal=stub_portal,
        portal_settings=PortalSettings(),
        storefront_origin="https://shop.example.com",
    )
    return app


@pytest.fixture
def client_factory(app):
    def _factory() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
    return _factory
