"""Session and credential persistence ports."""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from application.dtos.checkout import CheckoutSessionRecord
from application.dtos.payments import AppCredentials


@runtime_checkable
class CheckoutSessionStore(Protocol):
    async def get(self, session_id: str) -> Optional[CheckoutSessionRecord]: ...

    async def save(self, record: CheckoutSessionRecord) -> None: ...

    async def delete(self, session_id: str) -> bool: ...


@runtime_checkable
class CredentialStore(Protocol):
    async def get(self, context: str) -> Optional[AppCredentials]: ...

    async def save(self, credentials: AppCredentials) -> None: ...
