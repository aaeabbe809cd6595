"""Persistence for identity anchors and users."""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from .. import domain
from ..exceptions import AlreadyExists, StorageFailure
from ..passwords import HashedCredential
from ..roles import Role, parse_role
from . import util
from .models import DBAnchor, DBUser

logger = logging.getLogger(__name__)


class AnchorStore(object):
    """Creates and looks up :class:`.domain.IdentityAnchor` records."""

    def create(self) -> domain.IdentityAnchor:
        """Add a new anchor to the current transaction."""
        session = util.current_session()
        db_anchor = DBAnchor(anchor_id=util.new_id(), created_at=util.now())
        with util.storage_errors('Create anchor'):
            session.add(db_anchor)
            try:
                session.flush()
            except IntegrityError as e:
                logger.error('Anchor creation failed: %s', e)
                raise StorageFailure('Storage unavailable') from e
        return _anchor_to_domain(db_anchor)

    def find_by_id(self, anchor_id: str) -> Optional[domain.IdentityAnchor]:
        """Get an anchor by ID, or ``None``."""
        with util.storage_errors('Load anchor'):
            db_anchor = util.current_session().get(DBAnchor, anchor_id)
        if db_anchor is None:
            return None
        return _anchor_to_domain(db_anchor)

    def count(self) -> int:
        """Get the number of anchors."""
        with util.storage_errors('Count anchors'):
            return int(util.current_session().query(DBAnchor).count())


class UserStore(object):
    """Creates, updates, and looks up :class:`.domain.User` records."""

    def create(self, anchor_id: str, email: str,
               credential: HashedCredential, name: domain.UserFullName,
               role: Role) -> domain.User:
        """
        Add a new user to the current transaction.

        Raises
        ------
        :class:`.AlreadyExists`
            The address is already taken. This is enforced by a unique
            constraint, so concurrent registrations cannot both succeed.

        """
        session = util.current_session()
        db_user = DBUser(
            user_id=util.new_id(),
            anchor_id=anchor_id,
            email=email,
            password_hash=credential.expose(),
            first_name=name.forename,
            last_name=name.surname,
            role=role.value,
            created_at=util.now()
        )
        with util.storage_errors('Create user'):
            session.add(db_user)
            try:
                session.flush()
            except IntegrityError as e:
                if util.violates(e, 'email'):
                    logger.debug('Address is already registered')
                    raise AlreadyExists('Address is already registered') \
                        from e
                logger.error('User creation failed: %s', e)
                raise StorageFailure('Storage unavailable') from e
        return _user_to_domain(db_user, with_credential=True)

    def find_by_email(self, email: str,
                      with_credential: bool = False) -> Optional[domain.User]:
        """Get a user by address, or ``None``."""
        with util.storage_errors('Load user by address'):
            db_user = util.current_session().query(DBUser) \
                .filter(DBUser.email == email) \
                .first()
        if db_user is None:
            return None
        return _user_to_domain(db_user, with_credential=with_credential)

    def find_by_id(self, user_id: str) -> Optional[domain.User]:
        """Get a user by ID, or ``None``."""
        with util.storage_errors('Load user'):
            db_user = util.current_session().get(DBUser, user_id)
        if db_user is None:
            return None
        return _user_to_domain(db_user)

    def list_all(self) -> List[domain.User]:
        """Get all users, oldest first."""
        with util.storage_errors('List users'):
            db_users = util.current_session().query(DBUser) \
                .order_by(DBUser.created_at, DBUser.email) \
                .all()
        return [_user_to_domain(db_user) for db_user in db_users]

    def update_role(self, user_id: str, role: Role) -> Optional[domain.User]:
        """Change a user's role in the current transaction."""
        session = util.current_session()
        with util.storage_errors('Update user role'):
            db_user = session.get(DBUser, user_id)
            if db_user is None:
                return None
            db_user.role = role.value
            db_user.updated_at = util.now()
            session.flush()
        return _user_to_domain(db_user)

    def count(self) -> int:
        """Get the number of users."""
        with util.storage_errors('Count users'):
            return int(util.current_session().query(DBUser).count())


def _anchor_to_domain(db_anchor: DBAnchor) -> domain.IdentityAnchor:
    return domain.IdentityAnchor(
        anchor_id=db_anchor.anchor_id,
        created_at=util.from_epoch(db_anchor.created_at),
        updated_at=util.from_epoch(db_anchor.updated_at)
    )


def _user_to_domain(db_user: DBUser,
                    with_credential: bool = False) -> domain.User:
    return domain.User(
        user_id=db_user.user_id,
        anchor_id=db_user.anchor_id,
        email=db_user.email,
        name=domain.UserFullName(
            forename=db_user.first_name,
            surname=db_user.last_name
        ),
        role=parse_role(db_user.role),
        credential=(HashedCredential(db_user.password_hash)
                    if with_credential else None),
        created_at=util.from_epoch(db_user.created_at),
        updated_at=util.from_epoch(db_user.updated_at)
    )
