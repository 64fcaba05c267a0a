"""
Store-app authorization callback.
"""
from __future__ import annotations

from typing import Optional

from application.dtos.payments import AppCredentials
from application.ports.payment_gateway import AppAuthClient
from application.ports.session_store import CredentialStore
from core.logging_config import get_logger
from domain.common.exceptions import DomainValidationException


logger = get_logger(__name__)


class AppAuthService:
    def __init__(self, client: Optional[AppAuthClient], store: CredentialStore) -> None:
        self.client = client
        self.store = store

    async def handle_callback(
        self, *, code: Optional[str], scope: Optional[str], context: Optional[str]
    ) -> Optional[AppCredentials]:
        """Exchange the auth code for an access token and keep it per store context.

        Without a configured client the callback only acknowledges the install.
        """
        if not code:
            raise DomainValidationException("Missing authorization code", field="code")
        if self.client is None:
            logger.info("app_auth_acknowledged", context=context, exchanged=False)
            return None
        credentials = await self.client.exchange_code(code=code, scope=scope, context=context)
        await self.store.save(credentials)
        logger.info("app_auth_stored", context=credentials.context, scope=credentials.scope)
        return credentials
