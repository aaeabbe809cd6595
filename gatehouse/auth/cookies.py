"""
Carry a session token in a client-side cookie.

The cookie value is a signed JWT holding the opaque session token and the
moment the session ends. The signature keeps clients from minting cookies
for tokens they guessed; the session store remains the authority on whether
the token is still valid.
"""

from datetime import datetime
from typing import Any, Mapping

import dateutil.parser
import jwt
from pytz import UTC
from flask import Response

from .. import domain
from ..exceptions import Unauthenticated

ALGORITHM = 'HS256'


def pack(session: domain.Session, secret: str) -> str:
    """Generate a cookie value for ``session``."""
    return jwt.encode({
        'token': session.token,
        'user_id': session.user_id,
        'expires': session.end_time.isoformat()
    }, secret, algorithm=ALGORITHM)


def unpack(cookie: str, secret: str) -> str:
    """
    Get the session token from a cookie value.

    Raises
    ------
    :class:`.Unauthenticated`
        The cookie is malformed, forged, or past its expiry.

    """
    try:
        data = dict(jwt.decode(cookie, secret, algorithms=[ALGORITHM]))
        expires = dateutil.parser.parse(data['expires'])
        token: str = data['token']
    except (KeyError, ValueError, jwt.exceptions.InvalidTokenError) as e:
        raise Unauthenticated('Session cookie is malformed') from e
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=UTC)
    if expires <= datetime.now(tz=UTC):
        raise Unauthenticated('Session has expired')
    return token


def set_cookie(response: Response, session: domain.Session,
               config: Mapping[str, Any]) -> None:
    """Attach a session cookie to ``response``."""
    response.set_cookie(
        config['AUTH_SESSION_COOKIE_NAME'],
        pack(session, config['JWT_SECRET']),
        expires=session.end_time,
        domain=config.get('AUTH_SESSION_COOKIE_DOMAIN') or None,
        secure=bool(config.get('AUTH_SESSION_COOKIE_SECURE', True)),
        httponly=True,
        samesite='Strict'
    )


def clear_cookie(response: Response, config: Mapping[str, Any]) -> None:
    """Tell the client to discard its session cookie."""
    response.set_cookie(
        config['AUTH_SESSION_COOKIE_NAME'], '',
        max_age=0, expires=datetime.now(tz=UTC),
        domain=config.get('AUTH_SESSION_COOKIE_DOMAIN') or None,
        secure=bool(config.get('AUTH_SESSION_COOKIE_SECURE', True)),
        httponly=True,
        samesite='Strict'
    )
