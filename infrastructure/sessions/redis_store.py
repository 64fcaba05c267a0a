"""Redis backed session and credential stores."""
from __future__ import annotations

from typing import Optional

from redis import asyncio as aioredis

from application.dtos.checkout import CheckoutSessionRecord
from application.dtos.payments import AppCredentials


class _NamespacedRedis:
    def __init__(self, client: aioredis.Redis, namespace: str = "") -> None:
        self._client = client
        self._namespace = namespace.strip(":")

    def _format_key(self, *parts: str) -> str:
        key = ":".join(parts)
        if not self._namespace:
            return key
        return f"{self._namespace}:{key}"


class RedisCheckoutSessionStore(_NamespacedRedis):
    def __init__(self, client: aioredis.Redis, namespace: str = "", ttl_seconds: int = 3600) -> None:
        super().__init__(client, namespace)
        self._ttl = ttl_seconds

    async def get(self, session_id: str) -> Optional[CheckoutSessionRecord]:
        value = await self._client.get(self._format_key("session", session_id))
        if value is None:
            return None
        return CheckoutSessionRecord.model_validate_json(value)

    async def save(self, record: CheckoutSessionRecord) -> None:
        key = self._format_key("session", record.id)
        payload = record.model_dump_json()
        if self._ttl and self._ttl > 0:
            await self._client.set(key, payload, ex=self._ttl)
        else:
            await self._client.set(key, payload)

    async def delete(self, session_id: str) -> bool:
        return bool(await self._client.delete(self._format_key("session", session_id)))


class RedisCredentialStore(_NamespacedRedis):
    async def get(self, context: str) -> Optional[AppCredentials]:
        value = await self._client.get(self._format_key("credentials", context))
        if value is None:
            return None
        return AppCredentials.model_validate_json(value)

    async def save(self, credentials: AppCredentials) -> None:
        await self._client.set(
            self._format_key("credentials", credentials.context),
            credentials.model_dump_json(),
        )
