"""Tests for :mod:`gatehouse.auth.cookies`."""

from datetime import datetime, timedelta
from unittest import TestCase

import jwt
from flask import Flask
from pytz import UTC

from ... import domain
from ...exceptions import Unauthenticated
from .. import cookies

SECRET = 'foosecret'


def _session(start: datetime, duration: int = 3600) -> domain.Session:
    return domain.Session(session_id='s1', user_id='u1', token='the-token',
                          start_time=start, duration=duration)


class TestPackUnpack(TestCase):
    """Cookies carry the token and are signed."""

    def test_round_trip(self):
        """The token can be recovered with the same secret."""
        session = _session(datetime.now(tz=UTC))
        cookie = cookies.pack(session, SECRET)
        self.assertEqual(cookies.unpack(cookie, SECRET), 'the-token')

    def test_wrong_secret(self):
        """A cookie signed with another secret is refused."""
        cookie = cookies.pack(_session(datetime.now(tz=UTC)), 'other')
        with self.assertRaises(Unauthenticated):
            cookies.unpack(cookie, SECRET)

    def test_garbage(self):
        """A malformed cookie is refused."""
        with self.assertRaises(Unauthenticated):
            cookies.unpack('not-a-jwt', SECRET)

    def test_missing_claims(self):
        """A signed cookie without the expected claims is refused."""
        cookie = jwt.encode({'foo': 'bar'}, SECRET,
                            algorithm=cookies.ALGORITHM)
        with self.assertRaises(Unauthenticated):
            cookies.unpack(cookie, SECRET)

    def test_expired(self):
        """A cookie for an ended session is refused."""
        session = _session(datetime.now(tz=UTC) - timedelta(hours=2))
        with self.assertRaises(Unauthenticated):
            cookies.unpack(cookies.pack(session, SECRET), SECRET)


class TestSetCookie(TestCase):
    """Tests for :func:`.cookies.set_cookie` and ``clear_cookie``."""

    def setUp(self):
        self.app = Flask('test')
        self.config = {
            'AUTH_SESSION_COOKIE_NAME': 'foo_cookie',
            'AUTH_SESSION_COOKIE_DOMAIN': None,
            'AUTH_SESSION_COOKIE_SECURE': True,
            'JWT_SECRET': SECRET
        }

    def test_set(self):
        """The cookie is secure, HTTP-only, and same-site."""
        response = self.app.response_class()
        cookies.set_cookie(response, _session(datetime.now(tz=UTC)),
                           self.config)
        header = response.headers['Set-Cookie']
        self.assertTrue(header.startswith('foo_cookie='))
        self.assertIn('Secure', header)
        self.assertIn('HttpOnly', header)
        self.assertIn('SameSite=Strict', header)
        self.assertNotIn('the-token', header,
                         'The token is not in the clear')

    def test_clear(self):
        """Clearing sends an empty, expired cookie."""
        response = self.app.response_class()
        cookies.clear_cookie(response, self.config)
        header = response.headers['Set-Cookie']
        self.assertTrue(header.startswith('foo_cookie=;'))
        self.assertIn('Max-Age=0', header)
