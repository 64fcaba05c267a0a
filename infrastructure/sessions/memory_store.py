"""In-process session and credential stores (single worker, tests)."""
from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

from application.dtos.checkout import CheckoutSessionRecord
from application.dtos.payments import AppCredentials


class InMemoryCheckoutSessionStore:
    def __init__(self, ttl_seconds: int = 0, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._items: dict[str, tuple[float, str]] = {}
        self._lock = asyncio.Lock()

    def _expired(self, stored_at: float) -> bool:
        return self._ttl > 0 and self._clock() - stored_at > self._ttl

    async def get(self, session_id: str) -> Optional[CheckoutSessionRecord]:
        async with self._lock:
            item = self._items.get(session_id)
            if item is None:
                return None
            stored_at, payload = item
            if self._expired(stored_at):
                del self._items[session_id]
                return None
        # Stored as JSON so callers never share a mutable record
        return CheckoutSessionRecord.model_validate_json(payload)

    async def save(self, record: CheckoutSessionRecord) -> None:
        async with self._lock:
            self._sweep()
            self._items[record.id] = (self._clock(), record.model_dump_json())

    def _sweep(self) -> None:
        """Drop expired sessions that were never read again."""
        if self._ttl <= 0:
            return
        for session_id in [k for k, (stored_at, _) in self._items.items() if self._expired(stored_at)]:
            del self._items[session_id]

    async def delete(self, session_id: str) -> bool:
        async with self._lock:
            return self._items.pop(session_id, None) is not None


class InMemoryCredentialStore:
    def __init__(self) -> None:
        self._items: dict[str, AppCredentials] = {}

    async def get(self, context: str) -> Optional[AppCredentials]:
        return self._items.get(context)

    async def save(self, credentials: AppCredentials) -> None:
        self._items[credentials.context] = credentials
