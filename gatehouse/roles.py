"""
Roles and permissions for principals.

Every principal carries exactly one :class:`Role`. What a principal may do is
fully determined by that role: there are no per-principal overrides. This
module holds the two static tables that define the model.

- :data:`PERMISSIONS` maps each role to the set of :class:`Permission` it
  grants.
- :data:`ASSIGNABLE` maps each role to the set of roles a principal holding it
  may hand out, e.g. when sending an invitation or changing another
  principal's role.

Both tables are plain data, and every entry is written out explicitly; in
particular :attr:`Role.UNDEFINED` is listed with empty sets rather than being
left to a fallback. Rather than comparing roles or permissions by string,
import the enum members from here.

.. code-block:: python

   from gatehouse import roles

   if roles.can_assign(inviter.role, roles.Role.ADMIN):
       ...

"""

from enum import Enum
from typing import Dict, FrozenSet

from .exceptions import UnknownRole


class Role(Enum):
    """Closed set of roles a principal can hold."""

    UNDEFINED = 'undefined'
    OWNER = 'owner'
    ADMIN = 'admin'

    def __str__(self) -> str:
        return self.value


class Permission(Enum):
    """Actions gated by role."""

    CONFIGURE_SETTINGS = 'configure_settings'
    """Change tenant-wide settings."""

    INVITE_USERS = 'invite_users'
    """Send, resend, and revoke invitations."""

    VIEW_USERS = 'view_users'
    """List principals and view their details."""

    VIEW_INVITATIONS = 'view_invitations'
    """List outstanding invitations."""

    ASSIGN_ROLES = 'assign_roles'
    """Change the role of an existing principal."""

    def __str__(self) -> str:
        return self.value


PERMISSIONS: Dict[Role, FrozenSet[Permission]] = {
    Role.OWNER: frozenset([
        Permission.CONFIGURE_SETTINGS,
        Permission.INVITE_USERS,
        Permission.VIEW_USERS,
        Permission.VIEW_INVITATIONS,
        Permission.ASSIGN_ROLES,
    ]),
    Role.ADMIN: frozenset([
        Permission.INVITE_USERS,
        Permission.VIEW_USERS,
        Permission.VIEW_INVITATIONS,
    ]),
    Role.UNDEFINED: frozenset(),
}
"""Permissions granted by each role."""

ASSIGNABLE: Dict[Role, FrozenSet[Role]] = {
    Role.OWNER: frozenset([Role.OWNER, Role.ADMIN]),
    Role.ADMIN: frozenset([Role.ADMIN]),
    Role.UNDEFINED: frozenset(),     # Not even itself.
}
"""Roles that each role may grant to others."""


def permissions_of(role: Role) -> FrozenSet[Permission]:
    """Get the set of permissions granted by ``role``."""
    return PERMISSIONS[role]


def has_permission(role: Role, permission: Permission) -> bool:
    """Determine whether ``role`` grants ``permission``."""
    return permission in PERMISSIONS[role]


def can_assign(grantor: Role, target: Role) -> bool:
    """
    Determine whether a principal with role ``grantor`` may grant ``target``.

    Parameters
    ----------
    grantor : :class:`Role`
        Role of the principal performing the assignment.
    target : :class:`Role`
        Role being handed out.

    Returns
    -------
    bool

    """
    return target in ASSIGNABLE[grantor]


def parse_role(value: str) -> Role:
    """
    Get the :class:`Role` for a stored role name.

    Unlike ``Role(value)``, the error raised here is a storage error: an
    unrecognized value in the database is corrupt data and must never be
    mapped onto some default role.

    Raises
    ------
    :class:`.UnknownRole`

    """
    try:
        return Role(value)
    except ValueError as e:
        raise UnknownRole(f'Unrecognized role: {value!r}') from e
