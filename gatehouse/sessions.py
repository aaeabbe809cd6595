"""
Issue, validate, and revoke bearer sessions.

A session is either active or it is gone. There is no background sweeper:
an expired session is deleted by whichever request first presents its token,
and that request (like any later one) is refused with
:class:`.Unauthenticated`. Sessions are never extended; logging in again
issues a new one.
"""

import logging
import secrets
from typing import Optional, Tuple, Union

from . import domain
from .directory import IdentityDirectory
from .exceptions import Unauthenticated
from .passwords import RawSecret
from .store import SessionStore, transaction
from .store import util

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


def generate_token() -> str:
    """Generate an unguessable, URL-safe bearer token."""
    return secrets.token_urlsafe(TOKEN_BYTES)


class SessionManager(object):
    """Creates sessions for authenticated users and resolves their tokens."""

    def __init__(self, sessions: SessionStore, directory: IdentityDirectory,
                 duration: int = 86400) -> None:
        if duration <= 0:
            raise ValueError('Session duration must be positive')
        self.sessions = sessions
        self.directory = directory
        self.duration = duration

    def login(self, email: str, secret: Union[str, RawSecret],
              duration: Optional[int] = None,
              user_agent: Optional[str] = None,
              ip_address: Optional[str] = None) \
            -> Tuple[domain.User, domain.Session]:
        """
        Authenticate with address and secret, and issue a new session.

        Raises
        ------
        :class:`.InvalidCredentials`
        :class:`.SessionCreationFailed`

        """
        user = self.directory.authenticate(email, secret)
        session = self.issue(user.user_id, duration=duration,
                             user_agent=user_agent, ip_address=ip_address)
        return user, session

    def issue(self, user_id: str, duration: Optional[int] = None,
              user_agent: Optional[str] = None,
              ip_address: Optional[str] = None) -> domain.Session:
        """
        Create a new session for a user.

        Parameters
        ----------
        user_id : str
        duration : int
            Lifetime in seconds. Defaults to the configured duration.
        user_agent : str
        ip_address : str
            Client details, kept for reference only.

        Returns
        -------
        :class:`.domain.Session`

        Raises
        ------
        :class:`.SessionCreationFailed`
            The generated token collided with an existing one. Nothing was
            stored; calling again will generate a different token.

        """
        if duration is None:
            duration = self.duration
        if duration <= 0:
            raise ValueError('Session duration must be positive')
        with transaction():
            session = self.sessions.create(user_id, generate_token(),
                                           duration, user_agent=user_agent,
                                           ip_address=ip_address)
        logger.debug('Created session %s for user %s', session.session_id,
                     user_id)
        return session

    def validate(self, token: Optional[str]) -> domain.User:
        """
        Get the user that owns an active session.

        Raises
        ------
        :class:`.Unauthenticated`
            No token was given, no session has it, the session has expired
            (it is deleted now), or its user no longer exists.

        """
        if not token:
            raise Unauthenticated('No session token')
        with transaction():
            session = self.sessions.find_by_token(token)
            if session is None:
                logger.debug('No such session')
                raise Unauthenticated('Invalid session')
            if session.is_expired(util.from_epoch(util.now())):
                # A concurrent request may have deleted it already; that is
                # a no-op here. Raise only after commit so the delete sticks.
                self.sessions.delete_by_id(session.session_id)
                logger.info('Session %s has expired', session.session_id)
                expired = True
            else:
                expired = False
        if expired:
            raise Unauthenticated('Session has expired')
        user = self.directory.get_by_id(session.user_id)
        if user is None:
            logger.debug('Session %s has no user', session.session_id)
            raise Unauthenticated('Invalid session')
        return user

    def revoke(self, token: Optional[str]) -> None:
        """Delete a session. Unknown or empty tokens are ignored."""
        if not token:
            return
        with transaction():
            deleted = self.sessions.delete_by_token(token)
        logger.debug('Revoked %i session(s)', deleted)

    def revoke_all(self, user_id: str) -> int:
        """Delete every session of a user, e.g. after a role change."""
        with transaction():
            deleted = self.sessions.delete_by_user(user_id)
        logger.info('Revoked %i session(s) for user %s', deleted, user_id)
        return deleted
