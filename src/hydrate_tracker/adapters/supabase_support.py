"""Shared helpers for Supabase-backed repositories."""

import asyncio
from collections.abc import Awaitable
from typing import Protocol

import httpx
from supabase import AuthError, PostgrestAPIError

from hydrate_tracker.errors import ConstraintViolationError, RemoteUnavailableError

UNIQUE_VIOLATION = "23505"


class ExecutableQuery(Protocol):
    """A PostgREST request builder ready to run."""

    def execute(self) -> Awaitable[object]:
        """Run the request."""


async def run_query(
    query: ExecutableQuery, timeout_seconds: float
) -> list[dict[str, object]]:
    """Execute a query within the timeout and return its rows.

    Wire failures are mapped onto the application's error taxonomy here so
    that services never see Supabase or httpx exceptions.
    """
    try:
        response = await asyncio.wait_for(query.execute(), timeout=timeout_seconds)
    except PostgrestAPIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise ConstraintViolationError(exc.message or str(exc)) from exc
        raise RemoteUnavailableError(exc.message or str(exc)) from exc
    except (AuthError, httpx.HTTPError) as exc:
        raise RemoteUnavailableError(str(exc)) from exc
    except TimeoutError as exc:
        raise RemoteUnavailableError(
            f"Remote call timed out after {timeout_seconds}s"
        ) from exc
    data = getattr(response, "data", None)
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return [data]
    return []


def parse_int(raw: object, default: int = 0) -> int:
    """Return an integer column value, or the default when it is unusable."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        return default
    try:
        return int(float(raw))
    except ValueError:
        return default
