"""Provides tools for working with authenticated sessions in Flask."""

import logging
from typing import Any, Optional

from flask import Flask, request

from . import cookies, decorators
from .gate import AuthorizationGate
from .. import exceptions
from ..store import current_session

logger = logging.getLogger(__name__)


class Auth(object):
    """
    Attaches the authenticated user to the request.

    Intended for use in a Flask application factory, after the core services
    have been registered on ``app.extensions['gatehouse']`` (see
    :func:`gatehouse.factory.create_web_app`), for example:

    .. code-block:: python

       from flask import Flask
       from gatehouse.auth import Auth


       def create_web_app() -> Flask:
          app = Flask('someapp')
          ...
          Auth(app)
          return app

    Each request gets ``request.auth``: an :class:`.AuthorizationGate` for
    the user behind the session cookie, or ``None`` if there is no cookie or
    the session is invalid or expired.
    """

    def __init__(self, app: Optional[Flask] = None) -> None:
        """
        Initialize ``app`` with the session loader.

        Parameters
        ----------
        app : :class:`Flask`

        """
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """
        Attach :meth:`.load_session` to the Flask app.

        Parameters
        ----------
        app : :class:`Flask`

        """
        self.app = app
        app.config.setdefault('AUTH_SESSION_COOKIE_NAME', 'gatehouse_session')
        app.config.setdefault('AUTH_SESSION_COOKIE_DOMAIN', None)
        app.config.setdefault('AUTH_SESSION_COOKIE_SECURE', True)
        self.app.before_request(self.load_session)

        @self.app.teardown_request
        def teardown_request(exception: Optional[BaseException]) -> None:
            session = current_session()
            if exception:
                session.rollback()

    def get_token(self) -> Optional[str]:
        """Get the session token carried by the request, if any."""
        cookie = request.cookies.get(
            self.app.config['AUTH_SESSION_COOKIE_NAME'], None
        )
        if cookie is None:
            return None
        try:
            return cookies.unpack(cookie, self.app.config['JWT_SECRET'])
        except exceptions.Unauthenticated as e:
            logger.debug('Discarding session cookie: %s', e)
            return None

    def load_session(self) -> None:
        """Resolve the session cookie, and attach the result to the request."""
        request.auth = None
        token = self.get_token()
        if token is None:
            return
        services: Any = self.app.extensions['gatehouse']
        try:
            user = services.sessions.validate(token)
        except exceptions.Unauthenticated as e:
            logger.debug('No valid session: %s', e)
            return
        request.auth = AuthorizationGate(user)
