"""
Exceptions for payment providers mapped to unified BusinessException variants.
"""
from __future__ import annotations

from typing import Optional
from domain.common.exceptions import BusinessException
from shared.codes.payment_codes import PaymentCode


def _details(provider: str, provider_code: str | None, details: Optional[dict]) -> dict:
    full_details = {"provider": provider, "provider_code": provider_code}
    if details:
        full_details.update(details)
    return full_details


class PaymentProviderError(BusinessException):
    def __init__(self, message: str, *, provider: str, provider_code: str | None = None, details: Optional[dict] = None):
        super().__init__(
            code=PaymentCode.PROVIDER_ERROR,
            message=message,
            error_type="PaymentProviderError",
            details=_details(provider, provider_code, details),
        )


class PaymentRecoverableError(BusinessException):
    def __init__(self, message: str, *, provider: str, provider_code: str | None = None, details: Optional[dict] = None):
        super().__init__(
            code=PaymentCode.PROVIDER_RECOVERABLE,
            message=message,
            error_type="PaymentRecoverableError",
            details=_details(provider, provider_code, details),
        )


class PortalResponseError(BusinessException):
    """The portal answered, but without a redirect URL."""

    def __init__(self, message: str, *, provider: str, details: Optional[dict] = None):
        super().__init__(
            code=PaymentCode.PORTAL_RESPONSE_ERROR,
            message=message,
            error_type="PortalResponseError",
            details=_details(provider, None, details),
        )


class AuthExchangeError(BusinessException):
    def __init__(self, message: str, *, provider: str, provider_code: str | None = None):
        super().__init__(
            code=PaymentCode.AUTH_EXCHANGE_FAILED,
            message=message,
            error_type="AuthExchangeError",
            details=_details(provider, provider_code, None),
        )
