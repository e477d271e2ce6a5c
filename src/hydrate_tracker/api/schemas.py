"""Request bodies for the HTTP API."""

from uuid import UUID

from pydantic import BaseModel, Field

from hydrate_tracker.domain.friendships import FriendshipStatus


class AddEntryRequest(BaseModel):
    """Drink to record."""

    amount: int


class ProfileUpdate(BaseModel):
    """Profile fields to change; missing or invalid values keep the old ones."""

    name: str | None = None
    goal: int | None = None


class PresetRequest(BaseModel):
    amount: int = Field(gt=0)


class ReminderRequest(BaseModel):
    time: str


class SignInRequest(BaseModel):
    access_token: str


class FriendRequestCreate(BaseModel):
    receiver_id: UUID


class FriendRequestResponse(BaseModel):
    """Receiver's answer to a pending request."""

    status: FriendshipStatus
