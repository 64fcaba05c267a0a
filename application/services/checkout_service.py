"""
Checkout use-cases: session lifecycle, step navigation, payment submission
and the hand-off to the external payment portal.

Each call loads the session record, rebuilds a CheckoutNavigator around it,
applies one controller operation and persists the resulting state.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Callable, Optional

from application.dtos.checkout import (
    CheckoutSessionRecord,
    CheckoutSessionView,
    CheckoutSnapshotDTO,
    RedirectView,
    ReportError,
    StepStatusView,
)
from application.dtos.payments import PortalRedirect, SubmitPaymentRequest
from application.ports.payment_gateway import PaymentPortal
from application.ports.session_store import CheckoutSessionStore
from application.services.payment_method_service import PaymentMethodService
from application.services.portal_payload import build_portal_request, portal_form_fields
from core.logging_config import get_logger
from core.settings import PortalSettings
from domain.checkout.entity import CheckoutState
from domain.checkout.service import AnalyticsTracker, CheckoutNavigator, ErrorLogger
from domain.checkout.steps import has_selected_shipping_options
from domain.common.exceptions import (
    BusinessException,
    CartChangedError,
    CheckoutSessionNotFound,
)
from shared.codes import BusinessCode


logger = get_logger(__name__)


class ReportedCheckoutError(BusinessException):
    """An error raised in the storefront and reported back to the controller."""

    def __init__(self, error_type: str, message: str):
        super().__init__(
            code=BusinessCode.BUSINESS_ERROR,
            message=message,
            error_type=error_type,
        )


class EmbeddedMessageOutbox:
    """Collects messages for the parent frame of an embedded checkout."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    def post_error(self, error: Exception) -> None:
        self.messages.append({"type": "CHECKOUT_ERROR", "payload": {"message": str(error)}})

    def post_signed_out(self) -> None:
        self.messages.append({"type": "SIGNED_OUT"})


@dataclass
class _Context:
    record: CheckoutSessionRecord
    navigator: CheckoutNavigator
    outbox: EmbeddedMessageOutbox


class CheckoutApplicationService:
    def __init__(
        self,
        store: CheckoutSessionStore,
        *,
        analytics_factory: Callable[[str], AnalyticsTracker],
        error_logger: ErrorLogger,
        methods: Optional[PaymentMethodService] = None,
        portal: Optional[PaymentPortal] = None,
        portal_settings: Optional[PortalSettings] = None,
        storefront_origin: str = "",
        url_defaults: Optional[dict[str, str]] = None,
    ) -> None:
        self.store = store
        self.analytics_factory = analytics_factory
        self.error_logger = error_logger
        self.methods = methods
        self.portal = portal
        self.portal_settings = portal_settings or PortalSettings()
        self.storefront_origin = storefront_origin
        self.url_defaults = url_defaults or {}

    # Session plumbing

    def _context(self, record: CheckoutSessionRecord) -> _Context:
        outbox = EmbeddedMessageOutbox()
        navigator = CheckoutNavigator(
            record.snapshot.to_domain(self.url_defaults),
            CheckoutState.from_dict(record.state),
            analytics=self.analytics_factory(record.id),
            error_logger=self.error_logger,
            messenger=outbox,
        )
        return _Context(record=record, navigator=navigator, outbox=outbox)

    async def _load_record(self, session_id: str) -> CheckoutSessionRecord:
        record = await self.store.get(session_id)
        if record is None:
            raise CheckoutSessionNotFound(session_id)
        return record

    async def _load(self, session_id: str) -> _Context:
        return self._context(await self._load_record(session_id))

    async def _save(self, ctx: _Context) -> None:
        ctx.record.state = ctx.navigator.state.to_dict()
        await self.store.save(ctx.record)

    def _view(self, ctx: _Context) -> CheckoutSessionView:
        nav = ctx.navigator
        redirect = RedirectView(url=nav.redirect.url, mode=nav.redirect.mode) if nav.redirect else None
        return CheckoutSessionView(
            id=ctx.record.id,
            steps=[StepStatusView(**s.to_dict()) for s in nav.visible_steps()],
            state=nav.state.to_dict(),
            is_payment_step_active=nav.is_payment_step_active,
            redirect=redirect,
            embedded_messages=list(ctx.outbox.messages),
        )

    async def apply(self, session_id: str, action: Callable[[CheckoutNavigator], None]) -> CheckoutSessionView:
        """Apply one controller operation to a stored session."""
        ctx = await self._load(session_id)
        state = ctx.navigator.state
        before = (state.active_step_type, state.default_step_type)
        action(ctx.navigator)
        if (state.active_step_type, state.default_step_type) != before:
            logger.info(
                "checkout_step_navigated",
                session_id=session_id,
                active_step=state.active_step_type.value if state.active_step_type else None,
                default_step=state.default_step_type.value if state.default_step_type else None,
            )
        await self._save(ctx)
        return self._view(ctx)

    # Use-cases

    async def create_session(self, snapshot: CheckoutSnapshotDTO) -> CheckoutSessionView:
        record = CheckoutSessionRecord(id=uuid.uuid4().hex, snapshot=snapshot)
        ctx = self._context(record)
        ctx.navigator.state.has_selected_shipping_options = has_selected_shipping_options(
            ctx.navigator.snapshot.consignments
        )
        ctx.navigator.handle_begin()
        await self._save(ctx)
        logger.info("checkout_session_created", session_id=record.id)
        return self._view(ctx)

    async def get_session(self, session_id: str) -> CheckoutSessionView:
        return self._view(await self._load(session_id))

    async def update_snapshot(self, session_id: str, snapshot: CheckoutSnapshotDTO) -> CheckoutSessionView:
        record = await self._load_record(session_id)
        record.snapshot = snapshot
        ctx = self._context(record)
        ctx.navigator.handle_consignments_updated(ctx.navigator.snapshot.consignments)
        await self._save(ctx)
        logger.info(
            "checkout_snapshot_updated",
            session_id=session_id,
            has_selected_shipping_options=ctx.navigator.state.has_selected_shipping_options,
        )
        return self._view(ctx)

    async def report_error(self, session_id: str, report: ReportError) -> CheckoutSessionView:
        if report.type == "CartChangedError":
            error: Exception = CartChangedError(report.message)
        else:
            error = ReportedCheckoutError(report.type, report.message)

        def _handle(nav: CheckoutNavigator) -> None:
            if report.unhandled:
                nav.handle_unhandled_error(error)
            else:
                nav.handle_error(error)

        return await self.apply(session_id, _handle)

    async def delete_session(self, session_id: str) -> None:
        if not await self.store.delete(session_id):
            raise CheckoutSessionNotFound(session_id)

    # Payment

    async def submit_payment(self, session_id: str, req: SubmitPaymentRequest) -> dict[str, Any]:
        """Validate and submit the selected method, then hand off to the portal."""
        if self.methods is None:
            raise RuntimeError("payment methods are not configured")
        ctx = await self._load(session_id)
        payment = await self.methods.submit(req.method_id, req.values, container_id=req.container_id)
        redirect = await self._initiate_portal(ctx)
        return {"payment": payment, "redirect": redirect, "session": self._view(ctx)}

    async def start_portal_redirect(self, session_id: str) -> PortalRedirect:
        ctx = await self._load(session_id)
        return await self._initiate_portal(ctx)

    async def _initiate_portal(self, ctx: _Context) -> PortalRedirect:
        if self.portal is None:
            raise RuntimeError("payment portal is not configured")
        nav = ctx.navigator
        req = build_portal_request(nav.snapshot, self.portal_settings, origin=self.storefront_origin)
        try:
            redirect_url = await self.portal.initiate(req)
        except BusinessException as exc:
            nav.handle_unhandled_error(exc)
            await self._save(ctx)
            raise
        nav.state.is_redirecting = True
        await self._save(ctx)
        logger.info(
            "checkout_redirecting_to_portal",
            session_id=ctx.record.id,
            order_number=req.orderNumber,
            portal=self.portal.provider,
        )
        return PortalRedirect(
            redirect_url=redirect_url,
            order_number=req.orderNumber,
            client_session_id=req.clientSessionId,
        )

    async def portal_form(self, session_id: str) -> tuple[str, list[tuple[str, str]]]:
        """Action URL and hidden inputs for the form-post portal hand-off."""
        ctx = await self._load(session_id)
        req = build_portal_request(ctx.navigator.snapshot, self.portal_settings, origin=self.storefront_origin)
        ctx.navigator.state.is_redirecting = True
        await self._save(ctx)
        return self.portal_settings.form_action_url, portal_form_fields(req)
