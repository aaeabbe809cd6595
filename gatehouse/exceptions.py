"""Exceptions."""


class InvalidCredentials(RuntimeError):
    """Unknown address or incorrect secret. Deliberately indistinguishable."""


class Unauthenticated(RuntimeError):
    """The bearer token is missing, unknown, or expired."""


class Forbidden(RuntimeError):
    """The principal's role does not grant the requested action."""


class AlreadyExists(RuntimeError):
    """A principal with this address already exists."""


class AlreadyInvited(RuntimeError):
    """An unexpired invitation to this address already exists."""


class Expired(RuntimeError):
    """The invitation has expired."""


class NotFound(RuntimeError):
    """The requested record does not exist."""


class HashingFailure(RuntimeError):
    """The credential hasher failed, or a stored hash is malformed."""


class StorageFailure(RuntimeError):
    """The persistence layer could not complete the operation."""


class NotificationFailure(RuntimeError):
    """The invitation could not be delivered."""


class SessionCreationFailed(StorageFailure):
    """Failed to create a session; safe to retry with a new token."""


class InvitationCreationFailed(StorageFailure):
    """Failed to create an invitation; safe to retry with a new token."""


class UnknownRole(StorageFailure):
    """A stored role or status value is not recognized."""
