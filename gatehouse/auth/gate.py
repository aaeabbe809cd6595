"""Permission checks for an authenticated principal."""

import logging
from typing import Iterable

from .. import domain, roles
from ..exceptions import Forbidden
from ..roles import Permission, Role

logger = logging.getLogger(__name__)


class AuthorizationGate(object):
    """
    Wraps a :class:`.domain.User` resolved from a valid session.

    Every check consults :mod:`gatehouse.roles` for the user's role, and
    raises :class:`.Forbidden` when the role falls short.
    """

    def __init__(self, user: domain.User) -> None:
        self.user = user

    def __repr__(self) -> str:
        return f'AuthorizationGate({self.user!r})'

    @property
    def role(self) -> Role:
        """Role of the wrapped user."""
        return self.user.role

    def permits(self, permission: Permission) -> bool:
        """Determine whether the user holds ``permission``."""
        return roles.has_permission(self.user.role, permission)

    def require(self, permission: Permission) -> None:
        """Raise :class:`.Forbidden` unless the user holds ``permission``."""
        if not self.permits(permission):
            logger.debug('User %s lacks %s', self.user.user_id, permission)
            raise Forbidden('Access denied')

    def require_any(self, permissions: Iterable[Permission]) -> None:
        """Raise :class:`.Forbidden` unless at least one is held."""
        if not any(self.permits(p) for p in permissions):
            logger.debug('User %s lacks all of the required permissions',
                         self.user.user_id)
            raise Forbidden('Access denied')

    def require_all(self, permissions: Iterable[Permission]) -> None:
        """Raise :class:`.Forbidden` unless every one is held."""
        for permission in permissions:
            self.require(permission)

    def can_assign(self, target: Role) -> None:
        """Raise :class:`.Forbidden` unless the user may grant ``target``."""
        if not roles.can_assign(self.user.role, target):
            logger.debug('User %s may not assign %s', self.user.user_id,
                         target)
            raise Forbidden('Access denied')
