"""
Script for bootstrapping the first owner.

Creates any missing tables, then registers an owner with the configured
address unless a user with that address already exists. Safe to run more
than once.
"""

import logging
from typing import Optional

import click

from . import domain
from .directory import IdentityDirectory
from .factory import create_web_app, get_services
from .roles import Role
from .store import create_all

logger = logging.getLogger(__name__)


def seed_owner(directory: IdentityDirectory, email: str, secret: str,
               name: domain.UserFullName) -> Optional[domain.User]:
    """
    Register an owner at ``email`` if the address is free.

    Returns
    -------
    :class:`.domain.User` or None
        The new owner, or ``None`` if the address was already registered.

    """
    if directory.find_by_address(email) is not None:
        logger.info('Owner %s already present; not seeding', email)
        return None
    logger.info('Seeding owner %s', email)
    return directory.register(email, secret, name, Role.OWNER)


@click.command()
@click.option('--email', default=None, help='Owner address')
@click.option('--first-name', default=None)
@click.option('--last-name', default=None)
def seed(email: Optional[str], first_name: Optional[str],
         last_name: Optional[str]) -> None:
    """Create tables and the owner user. For bootstrapping only."""
    app = create_web_app()
    with app.app_context():
        create_all()
        email = email or app.config['OWNER_EMAIL']
        secret = app.config['OWNER_PASSWORD']
        if not secret:
            secret = click.prompt('Owner password', hide_input=True,
                                  confirmation_prompt=True)
        name = domain.UserFullName(
            first_name or app.config['OWNER_FIRST_NAME'],
            last_name or app.config['OWNER_LAST_NAME']
        )
        owner = seed_owner(get_services(app).directory, email, secret, name)
    if owner is None:
        click.echo(f'{email} is already registered')
    else:
        click.echo(f'Created owner {owner.user_id} ({email})')


if __name__ == '__main__':
    seed()
