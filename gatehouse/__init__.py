"""
Identity, credentials, and access control for a multi-tenant application.

Quick start:

.. code-block:: python

   from gatehouse.factory import create_web_app, get_services
   from gatehouse.domain import UserFullName
   from gatehouse.roles import Role

   app = create_web_app(CREATE_DB=True)
   with app.app_context():
       services = get_services(app)
       owner = services.directory.register(
           'owner@example.com', 'correct horse', UserFullName('Ada', 'L'),
           Role.OWNER
       )
       user, session = services.sessions.login('owner@example.com',
                                               'correct horse')

"""

from .domain import Account, IdentityAnchor, Invitation, InvitationStatus, \
    Session, User, UserFullName
from .roles import Permission, Role
