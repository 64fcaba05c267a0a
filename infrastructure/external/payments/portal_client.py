"""
Hosted payment portal adapter (SmartPayments PaymentPortal/Initiate).

The initiate call registers the order and answers with the URL the shopper
is sent to. Authentication is two static headers, SPApiKey and ApiKey.
"""
from __future__ import annotations

from typing import Optional

import httpx

from application.dtos.payments import PortalInitiateRequest
from core.settings import PortalSettings, payment_settings
from infrastructure.external.payments.base import BasePaymentClient
from infrastructure.external.payments.exceptions import PortalResponseError


class PaymentPortalClient(BasePaymentClient):
    provider = "portal"

    def __init__(
        self,
        portal: Optional[PortalSettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            timeouts=payment_settings.timeouts.model_dump(),
            retry={"max": payment_settings.retry.max, "base": payment_settings.retry.base_backoff},
            transport=transport,
        )
        self.portal = portal or payment_settings.portal

    @property
    def initiate_url(self) -> str:
        return self.portal.base_url.rstrip("/") + "/" + self.portal.initiate_path.lstrip("/")

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json", "content-type": "application/json"}
        if self.portal.sp_api_key:
            headers["SPApiKey"] = self.portal.sp_api_key
        if self.portal.api_key:
            headers["ApiKey"] = self.portal.api_key
        return headers

    async def initiate(self, req: PortalInitiateRequest) -> str:
        response = await self._send(
            "POST",
            self.initiate_url,
            json=req.model_dump(mode="json"),
            headers=self._headers(),
        )
        try:
            body = response.json()
        except ValueError:
            raise PortalResponseError("Portal returned a non-JSON response", provider=self.provider) from None

        url = self._redirect_url(body)
        if not url:
            self._log("portal_unexpected_response", keys=sorted(body) if isinstance(body, dict) else None)
            raise PortalResponseError(
                "Unexpected response structure",
                provider=self.provider,
                details={"status": body.get("status") if isinstance(body, dict) else None},
            )
        self._log("portal_initiated", order_number=req.orderNumber)
        return url

    @staticmethod
    def _redirect_url(body: object) -> Optional[str]:
        if not isinstance(body, dict):
            return None
        for container in (body, body.get("data") or {}):
            if isinstance(container, dict):
                url = container.get("redirectUrl") or container.get("paymentUrl")
                if url:
                    return str(url)
        return None
