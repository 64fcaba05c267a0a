"""
OAuth code exchange for the store app install / auth callback.
"""
from __future__ import annotations

from typing import Optional

import httpx

from application.dtos.payments import AppCredentials
from core.config import AppCredentialSettings, settings
from core.settings import payment_settings
from infrastructure.external.payments.base import BasePaymentClient
from infrastructure.external.payments.exceptions import AuthExchangeError, PaymentProviderError


class AppAuthHttpClient(BasePaymentClient):
    provider = "app_oauth"

    def __init__(
        self,
        app: Optional[AppCredentialSettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            timeouts=payment_settings.timeouts.model_dump(),
            retry={"max": payment_settings.retry.max, "base": payment_settings.retry.base_backoff},
            transport=transport,
        )
        self.app = app or settings.app
        if not (self.app.client_id and self.app.client_secret):
            raise RuntimeError("APP__CLIENT_ID / APP__CLIENT_SECRET not configured")

    async def exchange_code(
        self, *, code: str, scope: Optional[str], context: Optional[str]
    ) -> AppCredentials:
        payload = {
            "client_id": self.app.client_id,
            "client_secret": self.app.client_secret,
            "code": code,
            "scope": scope or "",
            "grant_type": "authorization_code",
            "redirect_uri": self.app.redirect_uri or "",
            "context": context or "",
        }
        try:
            response = await self._send("POST", self.app.token_url, json=payload)
        except PaymentProviderError as exc:
            raise AuthExchangeError(exc.message, provider=self.provider, provider_code=(exc.details or {}).get("provider_code")) from exc

        try:
            body = response.json()
        except ValueError:
            raise AuthExchangeError("Token endpoint returned a non-JSON response", provider=self.provider) from None
        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            raise AuthExchangeError("Token response missing access_token", provider=self.provider)
        return AppCredentials(
            access_token=token,
            scope=body.get("scope", scope),
            context=body.get("context") or context or "",
            user=body.get("user"),
            account_uuid=body.get("account_uuid"),
        )
