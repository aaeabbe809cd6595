"""Persistence for bearer sessions."""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from .. import domain
from ..exceptions import SessionCreationFailed, StorageFailure
from . import util
from .models import DBSession

logger = logging.getLogger(__name__)


class SessionStore(object):
    """
    Stores sessions in the database.

    Rows are never updated. A session is created once and later deleted,
    either explicitly or when it is found to have expired.
    """

    def create(self, user_id: str, token: str, duration: int,
               user_agent: Optional[str] = None,
               ip_address: Optional[str] = None) -> domain.Session:
        """
        Add a new session to the current transaction.

        Raises
        ------
        :class:`.SessionCreationFailed`
            Another session already has ``token``. The caller may retry with
            a fresh token.

        """
        session = util.current_session()
        db_session = DBSession(
            session_id=util.new_id(),
            user_id=user_id,
            token=token,
            issued_at=util.now(),
            duration=duration,
            user_agent=user_agent,
            ip_address=ip_address
        )
        with util.storage_errors('Create session'):
            session.add(db_session)
            try:
                session.flush()
            except IntegrityError as e:
                if util.violates(e, 'token'):
                    logger.error('Session token collision')
                    raise SessionCreationFailed('Token collision') from e
                logger.error('Session creation failed: %s', e)
                raise StorageFailure('Storage unavailable') from e
        return _to_domain(db_session)

    def find_by_token(self, token: str) -> Optional[domain.Session]:
        """Get a session by its token, or ``None``."""
        with util.storage_errors('Load session'):
            db_session = util.current_session().query(DBSession) \
                .filter(DBSession.token == token) \
                .first()
        if db_session is None:
            return None
        return _to_domain(db_session)

    def find_by_id(self, session_id: str) -> Optional[domain.Session]:
        """Get a session by ID, or ``None``."""
        with util.storage_errors('Load session'):
            db_session = util.current_session().get(DBSession, session_id)
        if db_session is None:
            return None
        return _to_domain(db_session)

    def list_by_user(self, user_id: str) -> List[domain.Session]:
        """Get all sessions of a user, oldest first."""
        with util.storage_errors('List sessions'):
            db_sessions = util.current_session().query(DBSession) \
                .filter(DBSession.user_id == user_id) \
                .order_by(DBSession.issued_at) \
                .all()
        return [_to_domain(db_session) for db_session in db_sessions]

    def delete_by_id(self, session_id: str) -> int:
        """Delete a session by ID. Deleting a missing session is a no-op."""
        with util.storage_errors('Delete session'):
            return int(util.current_session().query(DBSession)
                       .filter(DBSession.session_id == session_id)
                       .delete(synchronize_session=False))

    def delete_by_token(self, token: str) -> int:
        """Delete a session by token. Deleting a missing session is a no-op."""
        with util.storage_errors('Delete session'):
            return int(util.current_session().query(DBSession)
                       .filter(DBSession.token == token)
                       .delete(synchronize_session=False))

    def delete_by_user(self, user_id: str) -> int:
        """Delete every session of a user."""
        with util.storage_errors('Delete sessions'):
            return int(util.current_session().query(DBSession)
                       .filter(DBSession.user_id == user_id)
                       .delete(synchronize_session=False))


def _to_domain(db_session: DBSession) -> domain.Session:
    return domain.Session(
        session_id=db_session.session_id,
        user_id=db_session.user_id,
        token=db_session.token,
        start_time=util.from_epoch(db_session.issued_at),
        duration=db_session.duration,
        user_agent=db_session.user_agent,
        ip_address=db_session.ip_address
    )
