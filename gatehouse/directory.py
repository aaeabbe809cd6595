"""Provide an API for creating, finding, and authenticating users."""

import logging
from typing import List, Optional, Union

from . import domain
from .auth.gate import AuthorizationGate
from .exceptions import AlreadyExists, Forbidden, InvalidCredentials, \
    NotFound
from .passwords import CredentialHasher, RawSecret
from .roles import Permission, Role
from .store import AccountStore, AnchorStore, UserStore, transaction

logger = logging.getLogger(__name__)


class IdentityDirectory(object):
    """
    The only place where users come into existence.

    A user is never created on its own: the anchor that ties it to its other
    records, the user itself, and the account opened for it are written in
    one transaction, so either all three exist or none does.
    """

    def __init__(self, anchors: AnchorStore, users: UserStore,
                 accounts: AccountStore, hasher: CredentialHasher) -> None:
        self.anchors = anchors
        self.users = users
        self.accounts = accounts
        self.hasher = hasher

    def find_by_address(self, email: str) -> Optional[domain.User]:
        """Get a user by address, or ``None``."""
        return self.users.find_by_email(email)

    def get_by_id(self, user_id: str) -> Optional[domain.User]:
        """Get a user by ID, or ``None``."""
        return self.users.find_by_id(user_id)

    def get_account(self, user: domain.User) -> Optional[domain.Account]:
        """Get the account opened for ``user`` at registration."""
        return self.accounts.find_by_owner(user.anchor_id)

    def register(self, email: str, secret: Union[str, RawSecret],
                 name: domain.UserFullName, role: Role) -> domain.User:
        """
        Create a new user, along with its anchor and account.

        Parameters
        ----------
        email : str
            Login address; must not belong to any existing user.
        secret : :class:`.RawSecret`
            Plaintext secret. Only its hash is stored.
        name : :class:`.domain.UserFullName`
        role : :class:`.Role`

        Returns
        -------
        :class:`.domain.User`

        Raises
        ------
        :class:`.AlreadyExists`
            The address is taken, including by a concurrent registration.
        :class:`.HashingFailure`
        :class:`.StorageFailure`
            Nothing was persisted.

        """
        with transaction():
            user = self.provision(email, secret, name, role)
        logger.info('Registered user %s with role %s', user.user_id, role)
        return user

    def provision(self, email: str, secret: Union[str, RawSecret],
                  name: domain.UserFullName, role: Role) -> domain.User:
        """
        Add a new user, anchor, and account to the current transaction.

        Does not commit. Use :meth:`register` unless the caller already
        holds a :func:`.store.transaction` that must include the new user.
        """
        if not isinstance(secret, RawSecret):
            secret = RawSecret(secret)
        if self.users.find_by_email(email) is not None:
            logger.debug('Address is already registered')
            raise AlreadyExists('Address is already registered')

        credential = self.hasher.hash(secret)
        anchor = self.anchors.create()
        user = self.users.create(anchor.anchor_id, email, credential, name,
                                 role)
        self.accounts.create(anchor.anchor_id, allow_overdraft=False)
        return user

    def authenticate(self, email: str,
                     secret: Union[str, RawSecret]) -> domain.User:
        """
        Validate an address and secret.

        Raises
        ------
        :class:`.InvalidCredentials`
            The address is unknown, or the secret is wrong. The two cases
            cannot be told apart, and both cost one hash verification.

        """
        if not isinstance(secret, RawSecret):
            secret = RawSecret(secret)
        user = self.users.find_by_email(email, with_credential=True)
        if user is None or user.credential is None:
            self.hasher.dummy_verify(secret)
            logger.debug('Authentication failed')
            raise InvalidCredentials('Invalid address or secret')
        if not self.hasher.verify(user.credential, secret):
            logger.debug('Authentication failed')
            raise InvalidCredentials('Invalid address or secret')
        logger.debug('Authenticated user %s', user.user_id)
        return user._replace(credential=None)

    def list_users(self, actor: AuthorizationGate) -> List[domain.User]:
        """Get all users. Requires :attr:`.Permission.VIEW_USERS`."""
        actor.require(Permission.VIEW_USERS)
        return self.users.list_all()

    def update_role(self, actor: AuthorizationGate, user_id: str,
                    role: Role) -> domain.User:
        """
        Change the role of an existing user.

        The actor needs :attr:`.Permission.ASSIGN_ROLES`, must be allowed to
        assign both the new role and the user's current one, and cannot
        change their own role.

        Raises
        ------
        :class:`.Forbidden`
        :class:`.NotFound`

        """
        actor.require(Permission.ASSIGN_ROLES)
        actor.can_assign(role)
        if actor.user.user_id == user_id:
            raise Forbidden('Cannot change your own role')
        with transaction():
            target = self.users.find_by_id(user_id)
            if target is None:
                raise NotFound('No such user')
            actor.can_assign(target.role)
            updated = self.users.update_role(user_id, role)
        if updated is None:
            raise NotFound('No such user')
        logger.info('User %s changed role of %s from %s to %s',
                    actor.user.user_id, user_id, target.role, role)
        return updated
