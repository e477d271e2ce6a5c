"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from uuid import UUID

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from hydrate_tracker.api.schemas import (
    AddEntryRequest,
    FriendRequestCreate,
    FriendRequestResponse,
    PresetRequest,
    ProfileUpdate,
    ReminderRequest,
    SignInRequest,
)
from hydrate_tracker.app_logging import configure_logging
from hydrate_tracker.containers import AppContainer
from hydrate_tracker.domain.entries import Entry
from hydrate_tracker.errors import (
    AlreadyFriendsError,
    ConstraintViolationError,
    DuplicatePendingError,
    HydrateError,
    NotAuthenticatedError,
    RemoteUnavailableError,
    RequestNotPendingError,
    RequestRejectedError,
    SelfReferenceError,
)
from hydrate_tracker.services.stats import (
    percent_of_goal,
    sum_for_date,
    weekly_series,
)

_ERROR_STATUS: list[tuple[type[HydrateError], int]] = [
    (SelfReferenceError, status.HTTP_400_BAD_REQUEST),
    (DuplicatePendingError, status.HTTP_409_CONFLICT),
    (AlreadyFriendsError, status.HTTP_409_CONFLICT),
    (RequestRejectedError, status.HTTP_409_CONFLICT),
    (RequestNotPendingError, status.HTTP_409_CONFLICT),
    (ConstraintViolationError, status.HTTP_409_CONFLICT),
    (NotAuthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (RemoteUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        token = app.state.container.settings.supabase_access_token
        if token:
            await app.state.container.session_service.bootstrap(token)
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(HydrateError)
    async def hydrate_error_handler(
        _request: Request, exc: HydrateError
    ) -> JSONResponse:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
        for error_type, error_code in _ERROR_STATUS:
            if isinstance(exc, error_type):
                code = error_code
                break
        if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning("Request failed: %s", exc)
        return JSONResponse(status_code=code, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/today")
    async def today(request: Request) -> dict[str, object]:
        """Return today's total, clamped progress and entries."""
        state_container: AppContainer = request.app.state.container
        day = datetime.now(tz=UTC).date()
        state = state_container.state
        total = sum_for_date(state.entries, day)
        return {
            "date": day,
            "total_ml": total,
            "goal_ml": state.profile.goal,
            "percent": percent_of_goal(total, state.profile.goal),
            "entries": [
                _entry_payload(entry)
                for entry in state_container.entry_service.today_entries(day)
            ],
        }

    @app.get("/history")
    async def history(request: Request) -> dict[str, object]:
        """Return the last seven days, oldest first."""
        state = request.app.state.container.state
        day = datetime.now(tz=UTC).date()
        return {"days": weekly_series(state.entries, day, state.profile.goal)}

    @app.post("/entries", status_code=status.HTTP_201_CREATED)
    async def add_entry(body: AddEntryRequest, request: Request) -> dict[str, object]:
        """Record a drink."""
        state_container: AppContainer = request.app.state.container
        entries = await state_container.entry_service.add_entry(body.amount)
        return {"entries": [_entry_payload(entry) for entry in entries]}

    @app.delete("/entries/{entry_id}")
    async def remove_entry(entry_id: str, request: Request) -> dict[str, object]:
        """Remove an entry from the local log."""
        state_container: AppContainer = request.app.state.container
        removed = state_container.entry_service.remove_entry(entry_id)
        return {"removed": removed}

    @app.post("/entries/refresh")
    async def refresh_entries(request: Request) -> dict[str, object]:
        """Pull the authoritative entry log from the remote store."""
        state_container: AppContainer = request.app.state.container
        refreshed = await state_container.entry_service.refresh_from_remote()
        return {
            "refreshed": refreshed,
            "entries": [
                _entry_payload(entry) for entry in state_container.state.entries
            ],
        }

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the local profile."""
        state_container: AppContainer = request.app.state.container
        return {
            "profile": state_container.profile_service.profile,
            "authenticated": state_container.state.is_authenticated,
        }

    @app.put("/profile")
    async def save_profile(body: ProfileUpdate, request: Request) -> dict[str, object]:
        """Update name and goal."""
        state_container: AppContainer = request.app.state.container
        profile = await state_container.profile_service.save_profile(
            body.name, body.goal
        )
        return {"profile": profile}

    @app.get("/presets")
    async def list_presets(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return {"presets": state_container.preferences_service.list_presets()}

    @app.post("/presets")
    async def add_preset(body: PresetRequest, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return {"presets": state_container.preferences_service.add_preset(body.amount)}

    @app.delete("/presets/{amount}")
    async def remove_preset(amount: int, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return {"presets": state_container.preferences_service.remove_preset(amount)}

    @app.get("/reminders")
    async def list_reminders(request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return {"reminders": state_container.preferences_service.list_reminders()}

    @app.post("/reminders")
    async def add_reminder(
        body: ReminderRequest, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        reminders = state_container.preferences_service.add_reminder(body.time)
        return {"reminders": reminders}

    @app.delete("/reminders/{index}")
    async def remove_reminder(index: int, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        reminders = state_container.preferences_service.remove_reminder(index)
        return {"reminders": reminders}

    @app.post("/session")
    async def sign_in(body: SignInRequest, request: Request) -> dict[str, object]:
        """Sign in with a Supabase access token and pull remote data."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.session_service.bootstrap(body.access_token)
        if result.identity is None:
            raise NotAuthenticatedError("Access token was not accepted")
        return {
            "identity": result.identity,
            "profile": state_container.state.profile,
            "pending": result.pending,
            "friends": result.friends,
        }

    @app.delete("/session")
    async def sign_out(request: Request) -> dict[str, str]:
        state_container: AppContainer = request.app.state.container
        state_container.session_service.sign_out()
        return {"status": "ok"}

    @app.get("/users/search")
    async def search_users(term: str, request: Request) -> dict[str, object]:
        """Search users by display name."""
        state_container: AppContainer = request.app.state.container
        identity = state_container.state.identity
        users = await state_container.friendship_service.search_users(term)
        return {
            "users": [
                {"user": user, "is_self": identity is not None and user.id == identity}
                for user in users
            ]
        }

    @app.post("/friends/requests", status_code=status.HTTP_201_CREATED)
    async def send_request(
        body: FriendRequestCreate, request: Request
    ) -> dict[str, object]:
        """Send a friend request from the signed-in user."""
        state_container: AppContainer = request.app.state.container
        identity = _require_identity(state_container)
        friendship = await state_container.friendship_service.send_request(
            identity, body.receiver_id
        )
        return {"request": friendship}

    @app.get("/friends/requests")
    async def list_pending(request: Request) -> dict[str, object]:
        """List incoming pending requests."""
        state_container: AppContainer = request.app.state.container
        identity = _require_identity(state_container)
        pending = await state_container.friendship_service.list_pending(identity)
        return {"requests": pending}

    @app.post("/friends/requests/{request_id}")
    async def respond(
        request_id: UUID, body: FriendRequestResponse, request: Request
    ) -> dict[str, object]:
        """Accept or reject a pending request."""
        state_container: AppContainer = request.app.state.container
        _require_identity(state_container)
        outcome = await state_container.friendship_service.respond(
            request_id, body.status
        )
        return {"id": request_id, "status": outcome}

    @app.get("/friends")
    async def list_friends(request: Request) -> dict[str, object]:
        """Refresh and return today's progress of accepted friends."""
        state_container: AppContainer = request.app.state.container
        identity = _require_identity(state_container)
        views = await state_container.friendship_service.load_friend_views(identity)
        return {"friends": views}

    @app.get("/friends/{friend_id}/week")
    async def friend_week(friend_id: UUID, request: Request) -> dict[str, object]:
        """Return a friend's last seven days."""
        state_container: AppContainer = request.app.state.container
        _require_identity(state_container)
        days = await state_container.friendship_service.friend_week(friend_id)
        return {"id": friend_id, "days": days}

    @app.delete("/friends/{friend_id}")
    async def remove_friend(friend_id: UUID, request: Request) -> dict[str, object]:
        """Drop a friend from the local snapshot."""
        state_container: AppContainer = request.app.state.container
        removed = state_container.friendship_service.remove_cached_friend(friend_id)
        return {"removed": removed}

    return app


def _require_identity(container: AppContainer) -> UUID:
    identity = container.state.identity
    if identity is None:
        raise NotAuthenticatedError("Sign in to manage friends")
    return identity


def _entry_payload(entry: Entry) -> dict[str, object]:
    return {"id": entry.id, "ts": entry.timestamp, "amount": entry.amount}
