"""Application factory and component wiring."""

import logging
from typing import Any, NamedTuple, Optional

from flask import Flask, current_app

from . import config, store
from .app_logging import setup_logger
from .auth import Auth
from .directory import IdentityDirectory
from .invitations import InvitationManager
from .notifications import NotificationGateway, get_gateway
from .passwords import CredentialHasher
from .sessions import SessionManager

logger = logging.getLogger(__name__)


class Services(NamedTuple):
    """The core components, wired together for one application."""

    hasher: CredentialHasher
    directory: IdentityDirectory
    sessions: SessionManager
    invitations: InvitationManager
    notifier: NotificationGateway


def build_services(cfg: Any,
                   notifier: Optional[NotificationGateway] = None) -> Services:
    """Construct the core components from configuration."""
    hasher = CredentialHasher(time_cost=cfg.get('ARGON2_TIME_COST'),
                              memory_cost=cfg.get('ARGON2_MEMORY_COST'),
                              parallelism=cfg.get('ARGON2_PARALLELISM'))
    directory = IdentityDirectory(store.AnchorStore(), store.UserStore(),
                                  store.AccountStore(), hasher)
    sessions = SessionManager(store.SessionStore(), directory,
                              duration=int(cfg.get('SESSION_DURATION', 86400)))
    if notifier is None:
        notifier = get_gateway(cfg)
    invitations = InvitationManager(
        store.InvitationStore(), directory, notifier,
        duration=int(cfg.get('INVITATION_DURATION', 604800)),
        rollback_on_notification_failure=bool(
            cfg.get('INVITATION_ROLLBACK_ON_NOTIFICATION_FAILURE', False)
        )
    )
    return Services(hasher, directory, sessions, invitations, notifier)


def create_web_app(notifier: Optional[NotificationGateway] = None,
                   **overrides: Any) -> Flask:
    """
    Initialize and configure the application.

    Parameters
    ----------
    notifier : :class:`.NotificationGateway`
        Used instead of the one named by ``NOTIFICATION_BACKEND``.
    overrides
        Configuration values that take precedence over :mod:`.config`.

    """
    app = Flask('gatehouse')
    app.config.from_object(config)
    app.config.update(overrides)
    setup_logger(app.config.get('LOG_LEVEL', 'INFO'))

    store.init_app(app)
    app.extensions['gatehouse'] = build_services(app.config, notifier)
    Auth(app)

    if app.config['CREATE_DB']:
        with app.app_context():
            store.create_all()
            logger.info('Created tables')
    return app


def get_services(app: Optional[Flask] = None) -> Services:
    """Get the components registered on ``app``, or on the current app."""
    if app is None:
        app = current_app
    services: Services = app.extensions['gatehouse']
    return services
