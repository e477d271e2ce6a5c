"""Supabase auth adapter."""

import asyncio
import logging
from dataclasses import dataclass
from uuid import UUID

import httpx
from supabase import AsyncClient, AuthError

from hydrate_tracker.errors import RemoteUnavailableError
from hydrate_tracker.services.session import IdentityProvider

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Resolves Supabase access tokens and authorizes table requests."""

    client: AsyncClient
    timeout_seconds: float = 10.0

    async def get_identity(self, access_token: str) -> UUID | None:
        """Return the user behind the token and use it for later requests."""
        try:
            response = await asyncio.wait_for(
                self.client.auth.get_user(access_token), timeout=self.timeout_seconds
            )
        except (AuthError, httpx.HTTPError, TimeoutError) as exc:
            raise RemoteUnavailableError(str(exc)) from exc
        user = getattr(response, "user", None)
        if user is None:
            logger.info("Access token did not resolve to a user")
            return None
        self.client.postgrest.auth(access_token)
        return UUID(str(user.id))
