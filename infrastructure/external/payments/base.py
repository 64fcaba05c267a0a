"""
Base client implementing shared concerns for outbound payment calls:
http, retry, logging, status mapping and error translation.

Concrete clients subclass and implement provider-specific logic.
"""
from __future__ import annotations

from typing import Any, Callable, Optional
from contextlib import asynccontextmanager

import httpx
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential, retry_if_exception_type

from core.logging_config import get_logger
from infrastructure.external.payments.exceptions import (
    PaymentProviderError,
    PaymentRecoverableError,
)
from shared.codes.payment_codes import PROVIDER_STATUS_TO_INTERNAL


logger = get_logger(__name__)

RECOVERABLE_STATUS_CODES = {429, 502, 503, 504}


class BasePaymentClient:
    provider: str = "base"

    def __init__(
        self,
        *,
        timeouts: Optional[dict[str, float]] = None,
        retry: Optional[dict[str, Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeouts_cfg = timeouts or {"connect": 1.0, "read": 5.0, "write": 5.0, "total": 10.0}
        self._retry_cfg = retry or {"max": 2, "base": 0.2}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def timeouts(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self._timeouts_cfg["connect"],
            read=self._timeouts_cfg["read"],
            write=self._timeouts_cfg["write"],
            timeout=self._timeouts_cfg["total"],
        )

    @asynccontextmanager
    async def client(self):
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeouts, transport=self._transport)
        # Kept open for reuse; aclose() releases it
        yield self._client

    async def aclose(self) -> None:
        """Close underlying HTTP client if created."""
        if self._client is not None:
            try:
                await self._client.aclose()
            finally:
                self._client = None

    async def _retry(self, fn: Callable[[], Any]):
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(int(self._retry_cfg["max"]) + 1),
            wait=wait_exponential(multiplier=self._retry_cfg["base"], min=0.1, max=2.0),
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.TransportError)),
            reraise=True,
        ):
            with attempt:
                return await fn()

    async def _send(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        data: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        """Send with retries; transport failures become PaymentProviderError."""
        async def _once() -> httpx.Response:
            async with self.client() as http:
                return await http.request(method, url, json=json, data=data, headers=headers)

        self._log("payment_http_request", method=method, url=url)
        try:
            response = await self._retry(_once)
        except httpx.TimeoutException as exc:
            raise PaymentRecoverableError(f"Request timed out: {exc}", provider=self.provider) from exc
        except httpx.TransportError as exc:
            raise PaymentProviderError(f"Network error: {exc}", provider=self.provider) from exc
        self._log("payment_http_response", method=method, url=url, status_code=response.status_code)

        if response.status_code in RECOVERABLE_STATUS_CODES:
            raise PaymentRecoverableError(
                f"Provider temporarily unavailable (HTTP {response.status_code})",
                provider=self.provider,
                provider_code=str(response.status_code),
            )
        if response.status_code >= 400:
            raise PaymentProviderError(
                self._error_message(response),
                provider=self.provider,
                provider_code=str(response.status_code),
            )
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        fallback = f"Provider request failed with status {response.status_code}"
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or body.get("detail") or fallback)
        return fallback

    # Helpers
    def _map_status(self, provider_status: str) -> str:
        mapping = PROVIDER_STATUS_TO_INTERNAL.get(self.provider, {})
        return mapping.get(provider_status, provider_status)

    def _log(self, event: str, **kwargs) -> None:
        logger.info(
            event,
            provider=self.provider,
            **kwargs,
        )
