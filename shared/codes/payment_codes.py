"""
Payment specific codes and portal status mapping.
"""
from __future__ import annotations

from enum import IntEnum


class PaymentCode(IntEnum):
    # Generic success
    SUCCESS = 0

    # Payment method hooks (59xxx)
    METHOD_NOT_FOUND = 59000
    CONTAINER_NOT_FOUND = 59001
    VALIDATION_FAILED = 59002
    SUBMISSION_FAILED = 59003

    # Provider/Network errors (6xxxx)
    PROVIDER_ERROR = 60000
    PROVIDER_RECOVERABLE = 60001
    PORTAL_RESPONSE_ERROR = 60002
    AUTH_EXCHANGE_FAILED = 60003


# Portal/processor status -> internal status
PROVIDER_STATUS_TO_INTERNAL = {
    "simulated": {
        "approved": "success",
        "declined": "error",
    },
    "portal": {
        "Initiated": "pending",
        "INITIATED": "pending",
        "Success": "success",
        "SUCCESS": "success",
        "Failed": "error",
        "FAILED": "error",
    },
}
