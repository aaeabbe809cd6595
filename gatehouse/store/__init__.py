"""
Persistence for identities, sessions, invitations, and accounts.

Each store works against the Flask-SQLAlchemy session of the current
application context and only ever flushes. Callers decide where a unit of
work begins and ends by wrapping store calls in :func:`transaction`, which
commits everything done inside it at once or nothing at all. Uniqueness
(addresses, tokens, one invitation per address) is enforced by constraints
in the database, and violations surface as the matching domain error.
"""

from . import models, util
from .accounts import AccountStore
from .identities import AnchorStore, UserStore
from .invitations import InvitationStore
from .sessions import SessionStore
from .util import create_all, current_session, drop_all, init_app, \
    is_available, transaction
