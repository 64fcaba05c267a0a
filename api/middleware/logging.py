"""
Request/response logging middleware with timing and body sanitising.

Storefront payloads carry account numbers, PO numbers and payment details,
so bodies are masked with the same key set the structlog redaction uses.
"""
import json
import time
from typing import Any
from urllib.parse import parse_qs

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from core.config import settings
from core.logging_config import REDACTED_KEYS, get_logger


logger = get_logger(__name__)

_TRUTHY = {"true", "1", "yes"}
_FALSY = {"false", "0", "no"}


def _event_for(status_code: int) -> tuple[str, str]:
    if status_code >= 500:
        return "error", "request_server_error"
    if status_code >= 400:
        return "warning", "request_client_error"
    return "info", "request_completed"


class LoggingMiddleware(BaseHTTPMiddleware):
    SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}
    SENSITIVE_FIELDS = REDACTED_KEYS | {"password", "token", "secret", "code", "refresh_token"}

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.body_log_default = settings.LOG_REQUEST_BODY_ENABLE_BY_DEFAULT
        self.body_log_limit = settings.LOG_REQUEST_BODY_MAX_BYTES

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        context = await self._describe(request)
        logger.info("request_started", **context)
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                duration=time.perf_counter() - started,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
                **context,
            )
            raise

        duration = time.perf_counter() - started
        level, event = _event_for(response.status_code)
        getattr(logger, level)(event, status_code=response.status_code, duration=duration, **context)
        response.headers["X-Process-Time"] = f"{duration:.3f}"
        return response

    async def _describe(self, request: Request) -> dict:
        context: dict[str, Any] = {"query_params": self._mask(dict(request.query_params))}
        if request.method in {"POST", "PUT", "PATCH"} and self._body_logging_on(request):
            body = await self._body(request)
            if body is not None:
                context["body"] = body
        for header, key in (("User-Agent", "user_agent"), ("Origin", "origin")):
            value = request.headers.get(header)
            if value:
                context[key] = value
        return context

    def _body_logging_on(self, request: Request) -> bool:
        # X-Log-Body overrides the configured default
        flag = (request.headers.get("X-Log-Body") or "").lower()
        if flag in _TRUTHY:
            return True
        if flag in _FALSY:
            return False
        return bool(self.body_log_default and settings.DEBUG)

    async def _body(self, request: Request) -> Any:
        raw = await request.body()
        if not raw:
            return None
        text = raw[: self.body_log_limit].decode("utf-8", errors="ignore")
        content_type = request.headers.get("content-type", "").lower()
        if "application/json" in content_type:
            try:
                return self._mask(json.loads(text))
            except ValueError:
                # Truncated or malformed; never log raw JSON that may hold payment data
                return {"truncated": len(raw) > self.body_log_limit, "bytes": len(raw)}
        if "application/x-www-form-urlencoded" in content_type:
            return self._mask({k: v if len(v) > 1 else v[0] for k, v in parse_qs(text).items()})
        return {"content_type": content_type, "bytes": len(raw)}

    def _mask(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                k: "***" if str(k).lower() in self.SENSITIVE_FIELDS else self._mask(v)
                for k, v in data.items()
            }
        if isinstance(data, list):
            return [self._mask(v) for v in data]
        return data
