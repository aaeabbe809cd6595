"""
Invite new users, and turn accepted invitations into users.

An invitation starts out pending. Accepting it provisions the new user and
deletes the invitation in one transaction, so a token works exactly once.
Declined and revoked invitations keep their row (and their status) until the
address is invited again. Expiry is not a status: an expired invitation is
deleted when it is next looked at, the same way sessions are.

Whether a failed notification undoes the invitation is a configuration
decision (``rollback_on_notification_failure``). By default the invitation
stays, the failure is reported to the caller, and the invitation can be
sent again with :meth:`InvitationManager.resend`.
"""

import logging
import secrets
from typing import List, Union

from . import domain
from .auth.gate import AuthorizationGate
from .directory import IdentityDirectory
from .exceptions import AlreadyExists, AlreadyInvited, Expired, \
    NotFound, NotificationFailure
from .notifications import NotificationGateway
from .passwords import RawSecret
from .roles import Permission, Role
from .store import InvitationStore, transaction
from .store import util

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


def generate_token() -> str:
    """Generate an unguessable, URL-safe invitation token."""
    return secrets.token_urlsafe(TOKEN_BYTES)


class InvitationManager(object):
    """Creates, delivers, and redeems invitations."""

    def __init__(self, invitations: InvitationStore,
                 directory: IdentityDirectory, notifier: NotificationGateway,
                 duration: int = 604800,
                 rollback_on_notification_failure: bool = False) -> None:
        if duration <= 0:
            raise ValueError('Invitation duration must be positive')
        self.invitations = invitations
        self.directory = directory
        self.notifier = notifier
        self.duration = duration
        self.rollback_on_notification_failure = \
            rollback_on_notification_failure

    def _actor(self, user_id: str) -> AuthorizationGate:
        """Load a user afresh, so that checks use their current role."""
        user = self.directory.get_by_id(user_id)
        if user is None:
            raise NotFound('No such user')
        return AuthorizationGate(user)

    def invite(self, inviter_id: str, email: str,
               role: Role) -> domain.Invitation:
        """
        Invite ``email`` to join with ``role``, and notify the recipient.

        Parameters
        ----------
        inviter_id : str
            The user sending the invitation.
        email : str
            Address to invite.
        role : :class:`.Role`
            Role the new user will hold.

        Returns
        -------
        :class:`.domain.Invitation`

        Raises
        ------
        :class:`.Forbidden`
            The inviter may not invite, or may not grant ``role``.
        :class:`.AlreadyExists`
            A user with this address already exists.
        :class:`.AlreadyInvited`
            An unexpired pending invitation to this address already exists.
        :class:`.NotificationFailure`
            The invitation was stored but could not be delivered. Unless
            configured otherwise, it remains stored.

        """
        inviter = self._actor(inviter_id)
        inviter.require(Permission.INVITE_USERS)
        inviter.can_assign(role)
        if self.directory.find_by_address(email) is not None:
            raise AlreadyExists('Address is already registered')

        with transaction():
            existing = self.invitations.find_by_email(email)
            if existing is not None:
                if existing.is_pending and not self._expired(existing):
                    raise AlreadyInvited('Address is already invited')
                logger.debug('Replacing invitation %s',
                             existing.invitation_id)
                self.invitations.delete_by_id(existing.invitation_id)
            invitation = self.invitations.create(inviter_id, email,
                                                 generate_token(), role,
                                                 self.duration)
        logger.info('User %s created invitation %s (%s)', inviter_id,
                    invitation.invitation_id, role)
        self._notify(invitation, inviter.user)
        return invitation

    def _notify(self, invitation: domain.Invitation,
                inviter: domain.User) -> None:
        try:
            self.notifier.send_invitation(invitation.email, invitation.token,
                                          inviter.name.display)
        except NotificationFailure:
            if self.rollback_on_notification_failure:
                logger.warning('Delivery failed; deleting invitation %s',
                               invitation.invitation_id)
                with transaction():
                    self.invitations.delete_by_id(invitation.invitation_id)
            else:
                logger.warning('Delivery failed; invitation %s kept',
                               invitation.invitation_id)
            raise

    def _expired(self, invitation: domain.Invitation) -> bool:
        return invitation.is_expired(util.from_epoch(util.now()))

    def _redeemable(self, token: str) -> domain.Invitation:
        """
        Get the pending invitation for ``token``.

        An expired invitation is deleted. The exception is raised after the
        deletion has been committed.
        """
        with transaction():
            invitation = self.invitations.find_by_token(token)
            if invitation is None or not invitation.is_pending:
                raise NotFound('No such invitation')
            expired = self._expired(invitation)
            if expired:
                self.invitations.delete_by_id(invitation.invitation_id)
                logger.info('Invitation %s has expired',
                            invitation.invitation_id)
        if expired:
            raise Expired('Invitation has expired')
        return invitation

    def accept(self, token: str, secret: Union[str, RawSecret],
               name: domain.UserFullName) -> domain.User:
        """
        Redeem an invitation, creating the invited user.

        Returns
        -------
        :class:`.domain.User`
            Holds the role named in the invitation.

        Raises
        ------
        :class:`.NotFound`
            No pending invitation has this token, e.g. because it was
            already accepted.
        :class:`.Expired`
            The invitation expired; it has been deleted.
        :class:`.AlreadyExists`

        """
        if not token:
            raise NotFound('No such invitation')
        invitation = self._redeemable(token)
        with transaction():
            user = self.directory.provision(invitation.email, secret, name,
                                            invitation.role)
            deleted = self.invitations.delete_by_id(invitation.invitation_id,
                                                    pending_only=True)
            if not deleted:
                # No longer pending since it was looked up.
                raise NotFound('No such invitation')
        logger.info('Invitation %s accepted by user %s',
                    invitation.invitation_id, user.user_id)
        return user

    def decline(self, token: str) -> domain.Invitation:
        """
        Turn down an invitation.

        Raises
        ------
        :class:`.NotFound`
        :class:`.Expired`

        """
        invitation = self._redeemable(token)
        with transaction():
            declined = self.invitations.set_status(
                invitation.invitation_id, domain.InvitationStatus.DECLINED,
                pending_only=True
            )
        if declined is None:
            raise NotFound('No such invitation')
        logger.info('Invitation %s declined', invitation.invitation_id)
        return declined

    def revoke(self, actor_id: str,
               invitation_id: str) -> domain.Invitation:
        """
        Withdraw a pending invitation.

        The actor must be able to invite, and to grant the invitation's role.

        Raises
        ------
        :class:`.Forbidden`
        :class:`.NotFound`
        :class:`.Expired`
            The invitation expired; it has been deleted.

        """
        actor = self._actor(actor_id)
        actor.require(Permission.INVITE_USERS)
        with transaction():
            invitation = self.invitations.find_by_id(invitation_id)
            if invitation is None or not invitation.is_pending:
                raise NotFound('No such invitation')
            actor.can_assign(invitation.role)
            expired = self._expired(invitation)
            if expired:
                self.invitations.delete_by_id(invitation_id)
                logger.info('Invitation %s has expired', invitation_id)
                revoked = None
            else:
                revoked = self.invitations.set_status(
                    invitation_id, domain.InvitationStatus.REVOKED,
                    pending_only=True
                )
        if expired:
            raise Expired('Invitation has expired')
        if revoked is None:
            raise NotFound('No such invitation')
        logger.info('User %s revoked invitation %s', actor_id, invitation_id)
        return revoked

    def resend(self, actor_id: str, invitation_id: str) -> domain.Invitation:
        """
        Deliver a pending invitation again, with the same token.

        Raises
        ------
        :class:`.NotFound`
        :class:`.Expired`
        :class:`.NotificationFailure`
            The invitation is kept regardless of configuration.

        """
        actor = self._actor(actor_id)
        actor.require(Permission.INVITE_USERS)
        invitation = self.invitations.find_by_id(invitation_id)
        if invitation is None or not invitation.is_pending:
            raise NotFound('No such invitation')
        actor.can_assign(invitation.role)
        if self._expired(invitation):
            with transaction():
                self.invitations.delete_by_id(invitation_id)
            raise Expired('Invitation has expired')
        self.notifier.send_invitation(invitation.email, invitation.token,
                                      actor.user.name.display)
        logger.info('User %s resent invitation %s', actor_id, invitation_id)
        return invitation

    def list_invitations(self, actor: AuthorizationGate) \
            -> List[domain.Invitation]:
        """Get all invitations. Requires :attr:`.VIEW_INVITATIONS`."""
        actor.require(Permission.VIEW_INVITATIONS)
        return self.invitations.list_all()
