from __future__ import annotations

import gettext
import logging
from contextvars import ContextVar
from pathlib import Path

_current_locale: ContextVar[str] = ContextVar("current_locale", default="en")
_translators: dict[str, gettext.NullTranslations] = {}
_logger = logging.getLogger(__name__)

# English messages used when no compiled catalog provides the key
DEFAULT_MESSAGES: dict[str, str] = {
    "welcome": "Checkout payment extension",
    "health.ok": "Service is healthy",
    "error.internal": "Internal server error",
    "validation.failed": "Validation failed: {reason}",
    "auth.callback.success": "Authorization successful",
    "payments.methods.listed": "Payment methods",
    "payments.method.initialized": "Payment method initialized",
    "payments.method.submitted": "Payment submitted",
    "payments.method.not_found": "Payment method {method_id} is not registered",
    "payments.portal.initiated": "Redirecting to payment portal",
    "checkout.session.created": "Checkout session created",
    "checkout.session.state": "Checkout session",
    "checkout.session.updated": "Checkout session updated",
    "checkout.session.not_found": "Checkout session not found",
    "checkout.order_details.missing": "Missing order details",
    "checkout.cart.changed": "Your cart has changed, please review shipping",
    "checkout.shipping_option.expired": "The selected shipping option is no longer available",
}


def set_locale(locale: str) -> None:
    """Set current request locale (fallback to 'en')."""
    _current_locale.set(locale or "en")


def get_locale() -> str:
    """Get current request locale (default 'en')."""
    return _current_locale.get()


def _get_translator(locale: str) -> gettext.NullTranslations:
    tr = _translators.get(locale)
    if tr is not None:
        return tr
    localedir = Path(__file__).resolve().parent.parent / "locales"
    try:
        tr = gettext.translation(
            domain="messages",
            localedir=str(localedir),
            languages=[locale],
            fallback=True,
        )
    except OSError:
        tr = gettext.NullTranslations()
    _translators[locale] = tr
    return tr


def t(msgid: str, **params) -> str:
    """Translate msgid for the current locale and format it with params.

    Falls back to DEFAULT_MESSAGES, then to the msgid itself.
    """
    text = _get_translator(get_locale()).gettext(msgid)
    if text == msgid:
        text = DEFAULT_MESSAGES.get(msgid, msgid)
    if not params:
        return text
    try:
        return text.format(**params)
    except (KeyError, IndexError, ValueError) as exc:
        _logger.warning("i18n_format_failed msgid=%s error=%s", msgid, exc)
        return text
