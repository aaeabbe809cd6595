"""
Permission-based protection of Flask routes.

This module provides :func:`permitted`, a decorator factory that refuses a
request unless it carries a valid session whose user holds the required
:class:`.Permission`. The :class:`gatehouse.auth.Auth` extension resolves
the session before the route runs and leaves an
:class:`.AuthorizationGate` on ``request.auth`` (or ``None``).

.. code-block:: python

   from gatehouse.auth.decorators import permitted
   from gatehouse.roles import Permission


   @blueprint.route('/invitations', methods=['POST'])
   @permitted(Permission.INVITE_USERS)
   def send_invitation():
       invitation = services.invitations.invite(
           request.auth.user.user_id, form.email, form.role
       )
       ...

Operations in the core check permissions again where they execute, so the
decorator is a first line of refusal, not the only one.

When the decorated route function is called...

- If no authenticated user is available, an :class:`Unauthorized` exception
  is raised.
- If required permissions were given, the gate is checked for all of them
  (or for any one of them, with ``any_of=True``).
- Finally, if no exceptions have been raised, the route is called with the
  original parameters.

"""

import logging
from functools import wraps
from typing import Any, Callable, Optional

from flask import request
from werkzeug.exceptions import Forbidden, Unauthorized

from .. import exceptions
from ..roles import Permission
from .gate import AuthorizationGate

logger = logging.getLogger(__name__)


def permitted(*required: Permission, any_of: bool = False) -> Callable:
    """
    Generate a decorator to enforce authorization requirements.

    Parameters
    ----------
    required : :class:`.Permission`
        Permissions the user must hold. If none are given, any authenticated
        user may proceed.
    any_of : bool
        If ``True``, holding one of ``required`` is enough.

    Returns
    -------
    function

    """
    def protector(func: Callable) -> Callable:
        """Decorator that provides permission enforcement."""
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            gate: Optional[AuthorizationGate] = getattr(request, 'auth', None)
            if gate is None:
                logger.debug('No valid session; aborting')
                raise Unauthorized('Not a valid session')
            try:
                if required and any_of:
                    gate.require_any(required)
                elif required:
                    gate.require_all(required)
            except exceptions.Forbidden as e:
                raise Forbidden('Access denied') from e
            logger.debug('Request is authorized, proceeding')
            return func(*args, **kwargs)
        return wrapper
    return protector
