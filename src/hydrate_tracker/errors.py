"""Error taxonomy for the hydrate tracker."""


class HydrateError(Exception):
    """Base class for application errors."""


class RemoteError(HydrateError):
    """Failure reported while talking to the remote store."""


class RemoteUnavailableError(RemoteError):
    """Remote store could not be reached, timed out or refused the request."""


class ConstraintViolationError(RemoteError):
    """Remote store rejected a write on a uniqueness constraint."""


class NotAuthenticatedError(HydrateError):
    """Operation requires an authenticated identity."""


class FriendshipError(HydrateError):
    """Friend request validation failure shown to the user."""


class SelfReferenceError(FriendshipError):
    """A user tried to befriend themselves."""


class DuplicatePendingError(FriendshipError):
    """A pending request already exists between the two users."""


class AlreadyFriendsError(FriendshipError):
    """The two users are already friends."""


class RequestRejectedError(FriendshipError):
    """The receiver already rejected a request between the two users."""


class RequestNotPendingError(FriendshipError):
    """The request is unknown or was already answered."""
