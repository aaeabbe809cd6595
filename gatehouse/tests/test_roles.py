"""Tests for :mod:`gatehouse.roles`."""

from unittest import TestCase

from .. import roles
from ..exceptions import StorageFailure, UnknownRole
from ..roles import Permission, Role


class TestPermissions(TestCase):
    """The permission table is fixed and explicit."""

    def test_owner_holds_everything(self):
        """An owner holds every permission."""
        for permission in Permission:
            self.assertTrue(roles.has_permission(Role.OWNER, permission),
                            f'Owner should hold {permission}')

    def test_admin(self):
        """An admin can invite and view, but not configure or assign."""
        self.assertEqual(roles.permissions_of(Role.ADMIN), frozenset([
            Permission.INVITE_USERS,
            Permission.VIEW_USERS,
            Permission.VIEW_INVITATIONS
        ]))
        self.assertFalse(roles.has_permission(Role.ADMIN,
                                              Permission.CONFIGURE_SETTINGS))
        self.assertFalse(roles.has_permission(Role.ADMIN,
                                              Permission.ASSIGN_ROLES))

    def test_undefined_holds_nothing(self):
        """An undefined role grants no permissions at all."""
        self.assertEqual(roles.permissions_of(Role.UNDEFINED), frozenset())
        for permission in Permission:
            self.assertFalse(roles.has_permission(Role.UNDEFINED, permission))

    def test_every_role_is_listed(self):
        """Both tables have an explicit entry for every role."""
        self.assertEqual(set(roles.PERMISSIONS), set(Role))
        self.assertEqual(set(roles.ASSIGNABLE), set(Role))


class TestCanAssign(TestCase):
    """Tests for :func:`.roles.can_assign`."""

    def test_owner(self):
        """An owner can grant owner and admin."""
        self.assertTrue(roles.can_assign(Role.OWNER, Role.OWNER))
        self.assertTrue(roles.can_assign(Role.OWNER, Role.ADMIN))
        self.assertFalse(roles.can_assign(Role.OWNER, Role.UNDEFINED))

    def test_admin(self):
        """An admin can grant admin only."""
        self.assertTrue(roles.can_assign(Role.ADMIN, Role.ADMIN))
        self.assertFalse(roles.can_assign(Role.ADMIN, Role.OWNER))
        self.assertFalse(roles.can_assign(Role.ADMIN, Role.UNDEFINED))

    def test_undefined(self):
        """An undefined role cannot grant anything, not even itself."""
        for target in Role:
            self.assertFalse(roles.can_assign(Role.UNDEFINED, target))

    def test_grantor_holds_what_it_grants(self):
        """No role can grant a role with permissions it lacks itself."""
        for grantor, targets in roles.ASSIGNABLE.items():
            for target in targets:
                self.assertTrue(
                    roles.permissions_of(grantor)
                    >= roles.permissions_of(target),
                    f'{grantor} grants {target} but lacks its permissions'
                )

    def test_assignment_is_transitive(self):
        """Whatever a grantable role can grant, the grantor can too."""
        for grantor, targets in roles.ASSIGNABLE.items():
            for target in targets:
                for further in roles.ASSIGNABLE[target]:
                    self.assertTrue(
                        roles.can_assign(grantor, further),
                        f'{grantor} grants {target}, which grants {further}'
                    )


class TestParseRole(TestCase):
    """Tests for :func:`.roles.parse_role`."""

    def test_known(self):
        """Stored values map back to their roles."""
        for role in Role:
            self.assertIs(roles.parse_role(role.value), role)
            self.assertEqual(str(role), role.value)

    def test_unknown(self):
        """Unknown values are a storage error, not a default role."""
        with self.assertRaises(UnknownRole):
            roles.parse_role('superuser')
        with self.assertRaises(StorageFailure):
            roles.parse_role('')
