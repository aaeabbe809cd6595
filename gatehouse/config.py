"""Flask configuration."""
import os
import secrets

#################### Database ####################
SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI',
                                         'sqlite:///gatehouse.db')
SQLALCHEMY_TRACK_MODIFICATIONS = False

CREATE_DB = os.environ.get('CREATE_DB', '0') == '1'
"""Create missing tables when the application starts. Dev/test only."""

#################### Sessions ####################
SESSION_DURATION = int(os.environ.get('SESSION_DURATION', '86400'))
"""Lifetime of a session, in seconds."""

JWT_SECRET = os.environ.get('JWT_SECRET', secrets.token_urlsafe(16))
"""Signs session cookies. Set this explicitly for more than one process."""

AUTH_SESSION_COOKIE_NAME = os.environ.get('AUTH_SESSION_COOKIE_NAME',
                                          'gatehouse_session')
AUTH_SESSION_COOKIE_DOMAIN = os.environ.get('AUTH_SESSION_COOKIE_DOMAIN',
                                            None)
AUTH_SESSION_COOKIE_SECURE = bool(int(os.environ.get(
    'AUTH_SESSION_COOKIE_SECURE', '1')))

#################### Invitations ####################
INVITATION_DURATION = int(os.environ.get('INVITATION_DURATION', '604800'))
"""Lifetime of an invitation, in seconds."""

INVITATION_ROLLBACK_ON_NOTIFICATION_FAILURE = bool(int(os.environ.get(
    'INVITATION_ROLLBACK_ON_NOTIFICATION_FAILURE', '0')))
"""
Delete an invitation when it cannot be delivered.

When off (the default) the invitation stays stored, the caller is told that
delivery failed, and the invitation can be resent.
"""

NOTIFICATION_BACKEND = os.environ.get('NOTIFICATION_BACKEND', 'smtp')
"""Either ``smtp`` or ``log``; ``log`` sends nothing."""

SMTP_HOST = os.environ.get('SMTP_HOST', 'localhost')
SMTP_PORT = int(os.environ.get('SMTP_PORT', '25'))
SMTP_USERNAME = os.environ.get('SMTP_USERNAME', '')
SMTP_PASSWORD = os.environ.get('SMTP_PASSWORD', '')
SMTP_FROM = os.environ.get('SMTP_FROM', 'noreply@localhost')

#################### Credentials ####################
ARGON2_TIME_COST = int(os.environ.get('ARGON2_TIME_COST', '3'))
ARGON2_MEMORY_COST = int(os.environ.get('ARGON2_MEMORY_COST', '65536'))
"""KiB."""
ARGON2_PARALLELISM = int(os.environ.get('ARGON2_PARALLELISM', '4'))

#################### Bootstrap owner ####################
OWNER_EMAIL = os.environ.get('OWNER_EMAIL', 'admin@example.com')
OWNER_PASSWORD = os.environ.get('OWNER_PASSWORD', None)
"""If unset, ``gatehouse.seed`` prompts for it."""
OWNER_FIRST_NAME = os.environ.get('OWNER_FIRST_NAME', 'Admin')
OWNER_LAST_NAME = os.environ.get('OWNER_LAST_NAME', 'User')

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
