"""
Checkout analytics and error logging, emitted as structured log events.

Both collaborators only log; a downstream log pipeline turns the events into
step funnels and error reports.
"""
from __future__ import annotations

from core.logging_config import get_logger
from domain.checkout.entity import CheckoutStepType
from domain.checkout.service import error_payload


analytics_logger = get_logger("checkout.analytics")
error_logger = get_logger("checkout.errors")


class LoggingAnalyticsTracker:
    def __init__(self, session_id: str) -> None:
        self.session_id = session_id

    def _emit(self, event: str, **kwargs) -> None:
        analytics_logger.info(event, session_id=self.session_id, **kwargs)

    def track_checkout_begin(self) -> None:
        self._emit("checkout_begin")

    def track_step_viewed(self, step: CheckoutStepType) -> None:
        self._emit("checkout_step_viewed", step=step.value)

    def track_step_completed(self, step: CheckoutStepType) -> None:
        self._emit("checkout_step_completed", step=step.value)

    def exit_checkout(self) -> None:
        self._emit("checkout_exited")

    def wallet_button_click(self, method_name: str) -> None:
        self._emit("checkout_wallet_button_clicked", method_name=method_name)


class StructlogErrorLogger:
    def log(self, error: Exception) -> None:
        payload = error_payload(error)
        error_logger.error(
            "checkout_error",
            error_type=payload["type"],
            business_code=payload["code"],
            error=payload["message"],
        )


__all__ = ["LoggingAnalyticsTracker", "StructlogErrorLogger"]
