"""
Checkout session routes.

Every step operation loads the session, applies one navigator action and
returns the refreshed session view (steps, state, pending redirect and any
messages for an embedding parent frame).
"""
from __future__ import annotations

import html

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from api.dependencies import get_checkout_service
from application.dtos.checkout import (
    CheckoutSnapshotDTO,
    CreateCheckoutSession,
    CustomerView,
    NewsletterSubscription,
    ReportError,
    ShippingNextStep,
    SignOut,
    WalletButtonClick,
)
from application.dtos.payments import SubmitPaymentRequest
from application.services.checkout_service import CheckoutApplicationService
from core.i18n import t
from core.response import success_response
from domain.checkout.entity import CheckoutStepType


router = APIRouter(prefix="/checkouts", tags=["Checkout"])


def _session(view, key: str = "checkout.session.state"):
    return success_response(data=view.model_dump(mode="json"), message=t(key))


@router.post("", summary="Start a checkout session")
async def create_checkout(
    payload: CreateCheckoutSession,
    service: CheckoutApplicationService = Depends(get_checkout_service),
):
    view = await service.create_session(payload.snapshot)
    return _session(view, "checkout.session.created")


@router.get("/{session_id}", summary="Get checkout session")
async def get_checkout(session_id: str, service: CheckoutApplicationService = Depends(get_checkout_service)):
    return _session(await service.get_session(session_id))


@router.put("/{session_id}/snapshot", summary="Replace the order snapshot")
async def update_snapshot(
    session_id: str,
    payload: CheckoutSnapshotDTO,
    service: CheckoutApplicationService = Depends(get_checkout_service),
):
    view = await service.update_snapshot(session_id, payload)
    return _session(view, "checkout.session.updated")


@router.delete("/{session_id}", summary="Discard checkout session")
async def delete_checkout(session_id: str, service: CheckoutApplicationService = Depends(get_checkout_service)):
    await service.delete_session(session_id)
    return success_response(data={"id": session_id})


# Step navigation

@router.post("/{session_id}/ready")
async def ready(session_id: str, service: CheckoutApplicationService = Depends(get_checkout_service)):
    return _session(await service.apply(session_id, lambda nav: nav.handle_ready()))


@router.post("/{session_id}/steps/next")
async def next_step(session_id: str, service: CheckoutApplicationService = Depends(get_checkout_service)):
    view = await service.apply(session_id, lambda nav: nav.navigate_to_next_incomplete_step())
    return _session(view, "checkout.session.updated")


@router.post("/{session_id}/steps/{step_type}/edit")
async def edit_step(
    session_id: str,
    step_type: CheckoutStepType,
    service: CheckoutApplicationService = Depends(get_checkout_service),
):
    view = await service.apply(session_id, lambda nav: nav.handle_edit_step(step_type))
    return _session(view, "checkout.session.updated")


@router.post("/{session_id}/steps/{step_type}/expanded")
async def step_expanded(
    session_id: str,
    step_type: CheckoutStepType,
    service: CheckoutApplicationService = Depends(get_checkout_service),
):
    return _session(await service.apply(session_id, lambda nav: nav.handle_expanded(step_type)))


@router.post("/{session_id}/shipping/next")
async def shipping_next(
    session_id: str,
    payload: ShippingNextStep,
    service: CheckoutApplicationService = Depends(get_checkout_service),
):
    view = await service.apply(
        session_id, lambda nav: nav.handle_shipping_next_step(payload.is_billing_same_as_shipping)
    )
    return _session(view, "checkout.session.updated")


@router.post("/{session_id}/shipping/sign-in")
async def shipping_sign_in(session_id: str, service: CheckoutApplicationService = Depends(get_checkout_service)):
    view = await service.apply(session_id, lambda nav: nav.handle_shipping_sign_in())
    return _session(view, "checkout.session.updated")


@router.post("/{session_id}/shipping/create-account")
async def shipping_create_account(
    session_id: str, service: CheckoutApplicationService = Depends(get_checkout_service)
):
    view = await service.apply(session_id, lambda nav: nav.handle_shipping_create_account())
    return _session(view, "checkout.session.updated")


@router.post("/{session_id}/multi-shipping/toggle")
async def toggle_multi_shipping(session_id: str, service: CheckoutApplicationService = Depends(get_checkout_service)):
    view = await service.apply(session_id, lambda nav: nav.handle_toggle_multi_shipping())
    return _session(view, "checkout.session.updated")


# Customer

@router.post("/{session_id}/sign-out")
async def sign_out(
    session_id: str,
    payload: SignOut,
    service: CheckoutApplicationService = Depends(get_checkout_service),
):
    view = await service.apply(session_id, lambda nav: nav.handle_sign_out(is_cart_empty=payload.is_cart_empty))
    return _session(view, "checkout.session.updated")


@router.put("/{session_id}/customer-view")
async def customer_view(
    session_id: str,
    payload: CustomerView,
    service: CheckoutApplicationService = Depends(get_checkout_service),
):
    view = await service.apply(session_id, lambda nav: nav.set_customer_view_type(payload.view_type))
    return _session(view, "checkout.session.updated")


@router.put("/{session_id}/newsletter")
async def newsletter(
    session_id: str,
    payload: NewsletterSubscription,
    service: CheckoutApplicationService = Depends(get_checkout_service),
):
    view = await service.apply(session_id, lambda nav: nav.handle_newsletter_subscription(payload.subscribed))
    return _session(view, "checkout.session.updated")


# Errors and telemetry

@router.post("/{session_id}/errors")
async def report_error(
    session_id: str,
    payload: ReportError,
    service: CheckoutApplicationService = Depends(get_checkout_service),
):
    return _session(await service.report_error(session_id, payload))


@router.delete("/{session_id}/errors")
async def close_error_modal(session_id: str, service: CheckoutApplicationService = Depends(get_checkout_service)):
    return _session(await service.apply(session_id, lambda nav: nav.handle_close_error_modal()))


@router.post("/{session_id}/before-exit")
async def before_exit(session_id: str, service: CheckoutApplicationService = Depends(get_checkout_service)):
    return _session(await service.apply(session_id, lambda nav: nav.handle_before_exit()))


@router.post("/{session_id}/wallet-button")
async def wallet_button(
    session_id: str,
    payload: WalletButtonClick,
    service: CheckoutApplicationService = Depends(get_checkout_service),
):
    return _session(await service.apply(session_id, lambda nav: nav.handle_wallet_button_click(payload.method_name)))


# Payment

@router.post("/{session_id}/payment", summary="Submit payment and start the portal redirect")
async def submit_payment(
    session_id: str,
    payload: SubmitPaymentRequest,
    service: CheckoutApplicationService = Depends(get_checkout_service),
):
    result = await service.submit_payment(session_id, payload)
    redirect = result["redirect"]
    return success_response(
        data={
            "redirect_url": redirect.redirect_url,
            "order_number": redirect.order_number,
            "payment": result["payment"],
        },
        message=t("payments.method.submitted"),
    )


@router.post("/{session_id}/portal-redirect", summary="Register the order with the payment portal")
async def portal_redirect(session_id: str, service: CheckoutApplicationService = Depends(get_checkout_service)):
    redirect = await service.start_portal_redirect(session_id)
    return success_response(data=redirect.model_dump(), message=t("payments.portal.initiated"))


@router.get("/{session_id}/portal-form", response_class=HTMLResponse, summary="Auto-submitting portal form")
async def portal_form(session_id: str, service: CheckoutApplicationService = Depends(get_checkout_service)):
    action, fields = await service.portal_form(session_id)
    inputs = "\n".join(
        f'    <input type="hidden" name="{html.escape(name)}" value="{html.escape(value)}">'
        for name, value in fields
    )
    page = (
        "<!DOCTYPE html>\n<html>\n<head><meta charset=\"utf-8\"><title>Redirecting</title></head>\n"
        "<body onload=\"document.forms[0].submit()\">\n"
        f"  <form method=\"POST\" action=\"{html.escape(action)}\">\n"
        f"{inputs}\n"
        "    <noscript><button type=\"submit\">Continue to payment</button></noscript>\n"
        "  </form>\n</body>\n</html>\n"
    )
    return HTMLResponse(content=page)
