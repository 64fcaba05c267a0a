"""Session/credential store selection and the shared Redis connection."""
from __future__ import annotations

import asyncio
from typing import Optional

from redis import asyncio as aioredis

from core.config import settings
from core.logging_config import get_logger
from .memory_store import InMemoryCheckoutSessionStore, InMemoryCredentialStore
from .redis_store import RedisCheckoutSessionStore, RedisCredentialStore


logger = get_logger(__name__)

_redis_client: Optional[aioredis.Redis] = None
_lock = asyncio.Lock()


async def init_redis_client() -> aioredis.Redis:
    """Create the shared Redis connection (idempotent)."""
    global _redis_client

    if _redis_client is not None:
        return _redis_client

    async with _lock:
        if _redis_client is not None:
            return _redis_client
        if not settings.redis.url:
            raise RuntimeError("REDIS__URL is not configured")
        client = aioredis.from_url(
            settings.redis.url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=settings.redis.max_connections,
        )
        await client.ping()
        _redis_client = client
        logger.info("redis_connected", max_connections=settings.redis.max_connections)
        return client


async def shutdown_redis_client() -> None:
    global _redis_client

    if _redis_client is not None:
        try:
            await _redis_client.aclose()
        finally:
            _redis_client = None


async def create_stores(backend: Optional[str] = None):
    """Build the (session store, credential store) pair for the configured backend."""
    backend = (backend or settings.checkout.session_backend or "memory").lower()
    ttl = settings.checkout.session_ttl_seconds
    if backend == "redis":
        client = await init_redis_client()
        namespace = settings.redis.namespace
        return (
            RedisCheckoutSessionStore(client, namespace=namespace, ttl_seconds=ttl),
            RedisCredentialStore(client, namespace=namespace),
        )
    if backend != "memory":
        raise ValueError(f"Unsupported session backend: {backend}")
    return InMemoryCheckoutSessionStore(ttl_seconds=ttl), InMemoryCredentialStore()


__all__ = [
    "InMemoryCheckoutSessionStore",
    "InMemoryCredentialStore",
    "RedisCheckoutSessionStore",
    "RedisCredentialStore",
    "create_stores",
    "init_redis_client",
    "shutdown_redis_client",
]
