"""
FastAPI application entry point.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import extension as extension_routes
from api.routes import checkout as checkout_routes
from api.routes import payments as payments_routes
from api.middleware import RequestIDMiddleware, LoggingMiddleware, LocaleMiddleware
from application.services.auth_service import AppAuthService
from application.services.checkout_service import CheckoutApplicationService
from application.services.payment_method_service import PaymentMethodService, build_default_registry
from application.services.payment_service import PaymentService
from core.config import settings
from core.exceptions import register_exception_handlers
from core.response import success_response
from core.settings import payment_settings
from core.i18n import t
from core.logging_config import get_logger, configure_logging
from infrastructure.external.payments import (
    get_app_auth_client,
    get_payment_portal,
    get_payment_processor,
)
from infrastructure.sessions import create_stores, shutdown_redis_client
from infrastructure.telemetry import LoggingAnalyticsTracker, StructlogErrorLogger


configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build services once per process and release HTTP/Redis clients on shutdown."""
    session_store, credential_store = await create_stores()
    logger.info("session_store_initialized", backend=settings.checkout.session_backend)

    delay = payment_settings.simulated_delay_ms / 1000
    methods = PaymentMethodService(build_default_registry(processing_delay=delay))
    processor = get_payment_processor()
    portal = get_payment_portal()
    auth_client = get_app_auth_client()
    if auth_client is None:
        logger.info("app_auth_exchange_disabled", message="APP__CLIENT_ID / APP__CLIENT_SECRET not set")

    app.state.payment_method_service = methods
    app.state.payment_service = PaymentService(processor)
    app.state.payment_portal = portal
    app.state.auth_service = AppAuthService(auth_client, credential_store)
    app.state.checkout_service = CheckoutApplicationService(
        session_store,
        analytics_factory=LoggingAnalyticsTracker,
        error_logger=StructlogErrorLogger(),
        methods=methods,
        portal=portal,
        portal_settings=payment_settings.portal,
        storefront_origin=settings.checkout.storefront_origin,
        url_defaults={
            "login_url": settings.checkout.login_url,
            "cart_url": settings.checkout.cart_url,
            "create_account_url": settings.checkout.create_account_url,
        },
    )
    logger.info("application_started", processor=processor.provider, portal=portal.provider)

    yield

    await app.state.payment_service.aclose()
    await portal.aclose()
    if auth_client is not None:
        await auth_client.aclose()
    if settings.checkout.session_backend == "redis":
        await shutdown_redis_client()
        logger.info("redis_shutdown")
    logger.info("application_shutdown", message="Application shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="Custom checkout payment methods, checkout step orchestration and payment portal hand-off",
)

# The last added middleware runs first; RequestID wraps logging so every line carries request_id
app.add_middleware(LocaleMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


# Extension endpoints keep their original unprefixed paths
app.include_router(extension_routes.router)
app.include_router(payments_routes.router, prefix="/api/v1")
app.include_router(checkout_routes.router, prefix="/api/v1")


@app.get("/", tags=["Root"])
async def root():
    return success_response(
        data={
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "docs": "/docs",
            "redoc": "/redoc",
        },
        message=t("welcome"),
    )


@app.get("/health", tags=["Health"])
async def health_check():
    return success_response(data={"status": "healthy"}, message=t("health.ok"))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
