"""
Business codes carried in the response envelope.

Generic codes live here; payment method and provider codes are in
``shared.codes.payment_codes``.
"""
from enum import IntEnum


class BusinessCode(IntEnum):
    SUCCESS = 0

    # Request problems (1xxxx)
    PARAM_ERROR = 10000
    PARAM_MISSING = 10001
    PARAM_TYPE_ERROR = 10002
    PARAM_VALIDATION_ERROR = 10003

    # Business rules (2xxxx)
    BUSINESS_ERROR = 20000
    NOT_FOUND = 20006

    # Checkout flow (21xxx)
    CHECKOUT_SESSION_NOT_FOUND = 21001
    MISSING_ORDER_DETAILS = 21003
    CART_CHANGED = 21004
    SHIPPING_OPTION_EXPIRED = 21005

    # Access (3xxxx)
    UNAUTHORIZED = 30001
    FORBIDDEN = 30002

    # Server side (4xxxx)
    SYSTEM_ERROR = 40000
    SERVICE_UNAVAILABLE = 40003

    TOO_MANY_REQUESTS = 50001


__all__ = ["BusinessCode"]
