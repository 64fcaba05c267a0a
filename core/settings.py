"""
Payment-related settings using pydantic-settings v2 with nested env keys.

Kept apart from core.config.Settings so payment credentials can be loaded
(and rotated) independently of the application settings.
"""
from __future__ import annotations

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field


class PaymentTimeouts(BaseModel):
    connect: float = 1.0
    read: float = 5.0
    write: float = 5.0
    total: float = 10.0


class PaymentRetry(BaseModel):
    max: int = 2
    base_backoff: float = 0.2


class PortalSettings(BaseModel):
    """External payment portal (SmartPayments PaymentPortal/Initiate)."""
    base_url: str = "http://127.0.0.1:3000"
    initiate_path: str = "/api/v1/payments"
    form_action_url: str = (
        "https://apigtwb2cnp.us.dell.com/GE2/SmartPaymentsApi/v3/Commerce/Payments/PaymentPortal/Initiate"
    )
    sp_api_key: Optional[str] = None
    api_key: Optional[str] = None

    # Order constants sent with every initiate request
    buid: str = "11"
    country: str = "US"
    region: str = "US"
    segment: str = "dhs"
    language: str = "EN"
    sales_channel: str = "US_19"
    company_number: str = "14"
    payment_mode: str = "Initial"
    success_path: str = "/checkout/order-confirmation"
    cancel_path: str = "/checkout"


class PaymentSettings(BaseSettings):
    default_processor: str = Field(default="simulated", validation_alias="PAYMENT__DEFAULT_PROCESSOR")
    # Processing delay of the simulated processor and the custom-payment submit hook
    simulated_delay_ms: int = 0
    timeouts: PaymentTimeouts = Field(default_factory=PaymentTimeouts)
    retry: PaymentRetry = Field(default_factory=PaymentRetry)
    portal: PortalSettings = Field(default_factory=PortalSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )


payment_settings = PaymentSettings()
