"""Tests for :class:`gatehouse.auth.gate.AuthorizationGate`."""

from unittest import TestCase

from ... import domain
from ...exceptions import Forbidden
from ...roles import Permission, Role
from ..gate import AuthorizationGate


def _gate(role: Role) -> AuthorizationGate:
    return AuthorizationGate(domain.User(
        user_id='u1', anchor_id='a1', email='jane@example.com',
        name=domain.UserFullName('Jane', 'Doe'), role=role
    ))


class TestRequire(TestCase):
    """Tests for the ``require`` family."""

    def test_owner(self):
        """Owners pass every check."""
        gate = _gate(Role.OWNER)
        gate.require(Permission.CONFIGURE_SETTINGS)
        gate.require_all(list(Permission))
        gate.require_any([Permission.ASSIGN_ROLES])
        self.assertEqual(gate.role, Role.OWNER)

    def test_admin(self):
        """Admins cannot configure settings."""
        gate = _gate(Role.ADMIN)
        gate.require(Permission.INVITE_USERS)
        with self.assertRaises(Forbidden):
            gate.require(Permission.CONFIGURE_SETTINGS)
        with self.assertRaises(Forbidden):
            gate.require_all([Permission.INVITE_USERS,
                              Permission.CONFIGURE_SETTINGS])
        gate.require_any([Permission.INVITE_USERS,
                          Permission.CONFIGURE_SETTINGS])

    def test_undefined(self):
        """Undefined fails every check."""
        gate = _gate(Role.UNDEFINED)
        for permission in Permission:
            self.assertFalse(gate.permits(permission))
            with self.assertRaises(Forbidden):
                gate.require(permission)
        with self.assertRaises(Forbidden):
            gate.require_any(list(Permission))

    def test_require_any_of_nothing(self):
        """Requiring any of no permissions is never satisfied."""
        with self.assertRaises(Forbidden):
            _gate(Role.OWNER).require_any([])

    def test_require_all_of_nothing(self):
        """Requiring all of no permissions is always satisfied."""
        _gate(Role.UNDEFINED).require_all([])


class TestCanAssign(TestCase):
    """Tests for :meth:`.AuthorizationGate.can_assign`."""

    def test_admin(self):
        """Admins can grant admin but not owner."""
        gate = _gate(Role.ADMIN)
        gate.can_assign(Role.ADMIN)
        with self.assertRaises(Forbidden):
            gate.can_assign(Role.OWNER)

    def test_undefined(self):
        """Undefined cannot grant anything."""
        gate = _gate(Role.UNDEFINED)
        for role in Role:
            with self.assertRaises(Forbidden):
                gate.can_assign(role)
