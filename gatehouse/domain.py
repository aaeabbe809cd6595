"""Defines identity concepts for use in the core and its callers."""

from typing import Any, Optional, NamedTuple
from datetime import datetime, timedelta
from enum import Enum

from pytz import UTC

from .roles import Role
from .passwords import HashedCredential
from .exceptions import UnknownRole


class IdentityAnchor(NamedTuple):
    """Stable handle that ties a principal to its other records."""

    anchor_id: str
    """Unique identifier for the anchor."""

    created_at: datetime
    """When the anchor was created."""

    updated_at: Optional[datetime] = None
    """When the anchor was last touched, if ever."""


class UserFullName(NamedTuple):
    """Represents a user's full name."""

    forename: str
    """First name or given name."""

    surname: str
    """Last name or family name."""

    @property
    def display(self) -> str:
        """Name as shown to other people, e.g. in an invitation."""
        return f'{self.forename} {self.surname}'.strip()


class User(NamedTuple):
    """Represents a principal: someone who can log in."""

    user_id: str
    """Unique identifier for the user."""

    anchor_id: str
    """The :class:`.IdentityAnchor` that owns this user's records."""

    email: str
    """The user's login address. Unique across all users."""

    name: UserFullName
    """The user's full name."""

    role: Role
    """Determines everything the user is allowed to do."""

    credential: Optional[HashedCredential] = None
    """Hash of the user's secret. Only loaded where it is needed."""

    created_at: Optional[datetime] = None
    """When the user registered."""

    updated_at: Optional[datetime] = None
    """When the user was last modified, e.g. by a role change."""

    def __repr__(self) -> str:
        """Leave the credential out of any debug output."""
        return (f'User(user_id={self.user_id!r}, email={self.email!r},'
                f' role={self.role})')


class Session(NamedTuple):
    """Represents an authenticated session."""

    session_id: str
    """Unique identifier for the session."""

    user_id: str
    """The user for which the session was created."""

    token: str
    """Opaque bearer token. Unique across all sessions."""

    start_time: datetime
    """When the session was issued."""

    duration: int
    """Lifetime of the session, in seconds."""

    user_agent: Optional[str] = None
    """User agent of the client for which the session was created."""

    ip_address: Optional[str] = None
    """The IP address of the client for which the session was created."""

    def __repr__(self) -> str:
        """Leave the token out of any debug output."""
        return (f'Session(session_id={self.session_id!r},'
                f' user_id={self.user_id!r}, end_time={self.end_time})')

    @property
    def end_time(self) -> datetime:
        """The session is valid strictly before this moment."""
        return self.start_time + timedelta(seconds=self.duration)

    def is_expired(self, at: Optional[datetime] = None) -> bool:
        """Expired if ``at`` (default: now) is at or after :attr:`end_time`."""
        if at is None:
            at = datetime.now(tz=UTC)
        return at >= self.end_time

    @property
    def expired(self) -> bool:
        """Expired if the current time is at or after :attr:`.end_time`."""
        return self.is_expired()

    @property
    def expires(self) -> int:
        """
        Number of seconds until the session expires.

        If the session is already expired, returns 0.
        """
        remaining = (self.end_time - datetime.now(tz=UTC)).total_seconds()
        return max(int(remaining), 0)


class InvitationStatus(Enum):
    """Where an invitation is in its lifecycle."""

    PENDING = 'pending'
    ACCEPTED = 'accepted'
    DECLINED = 'declined'
    REVOKED = 'revoked'

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> 'InvitationStatus':
        """Get a status from its stored value; unknown values are an error."""
        try:
            return cls(value)
        except ValueError as e:
            raise UnknownRole(f'Unrecognized status: {value!r}') from e


class Invitation(NamedTuple):
    """An offer to join, sent to an address that has no account yet."""

    invitation_id: str
    """Unique identifier for the invitation."""

    inviter_id: str
    """The user who sent the invitation."""

    email: str
    """Address that was invited."""

    token: str
    """Opaque token sent to :attr:`email`. Unique across all invitations."""

    role: Role
    """Role the new user will hold upon acceptance."""

    start_time: datetime
    """When the invitation was issued."""

    duration: int
    """Lifetime of the invitation, in seconds."""

    status: InvitationStatus = InvitationStatus.PENDING
    """Current status. Expiry is not a status; see :meth:`is_expired`."""

    def __repr__(self) -> str:
        """Leave the token out of any debug output."""
        return (f'Invitation(invitation_id={self.invitation_id!r},'
                f' email={self.email!r}, role={self.role},'
                f' status={self.status})')

    @property
    def end_time(self) -> datetime:
        """The invitation can be used strictly before this moment."""
        return self.start_time + timedelta(seconds=self.duration)

    def is_expired(self, at: Optional[datetime] = None) -> bool:
        """Expired if ``at`` (default: now) is at or after :attr:`end_time`."""
        if at is None:
            at = datetime.now(tz=UTC)
        return at >= self.end_time

    @property
    def expired(self) -> bool:
        """Expired if the current time is at or after :attr:`.end_time`."""
        return self.is_expired()

    @property
    def is_pending(self) -> bool:
        """Only pending invitations can be accepted or declined."""
        return self.status is InvitationStatus.PENDING


class Account(NamedTuple):
    """Financial record opened for every new user."""

    account_id: str
    """Unique identifier for the account."""

    owner_anchor_id: str
    """The :class:`.IdentityAnchor` that owns the account."""

    balance: int = 0
    """Balance in cents. Always zero when the account is opened."""

    allow_overdraft: bool = False
    """Whether the balance may go negative."""


# Helpers and private functions.


def to_dict(obj: tuple) -> dict:
    """
    Generate a dict representation of a NamedTuple instance.

    This just uses the built-in ``_asdict`` method on the intance, but also
    calls this on any child NamedTuple instances (recursively) so that the
    entire tree is cast to ``dict``. Enums become their values and datetimes
    become ISO-8601 strings. Credentials are never included.

    Parameters
    ----------
    obj : tuple
        A NamedTuple instance.

    Returns
    -------
    dict

    """
    if not hasattr(obj, '_asdict'):  # NamedTuple-generated classes have this.
        return {}
    data = obj._asdict()  # type: ignore

    def _cast(value: Any) -> Any:
        if hasattr(value, '_asdict'):
            value = to_dict(value)
        elif isinstance(value, Enum):
            value = value.value
        elif isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, list):
            value = [_cast(o) for o in value]
        return value

    return {key: _cast(value) for key, value in data.items()
            if not isinstance(value, HashedCredential)}
