"""Persistence for invitations."""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from .. import domain
from ..exceptions import AlreadyInvited, InvitationCreationFailed, \
    StorageFailure
from ..roles import Role, parse_role
from . import util
from .models import DBInvitation

logger = logging.getLogger(__name__)

_PENDING = domain.InvitationStatus.PENDING.value


class InvitationStore(object):
    """Creates, looks up, updates, and deletes invitations."""

    def create(self, inviter_id: str, email: str, token: str, role: Role,
               duration: int) -> domain.Invitation:
        """
        Add a new pending invitation to the current transaction.

        Raises
        ------
        :class:`.AlreadyInvited`
            A row for ``email`` already exists.
        :class:`.InvitationCreationFailed`
            Another invitation already has ``token``; safe to retry.

        """
        session = util.current_session()
        db_invitation = DBInvitation(
            invitation_id=util.new_id(),
            inviter_id=inviter_id,
            email=email,
            token=token,
            role=role.value,
            status=domain.InvitationStatus.PENDING.value,
            issued_at=util.now(),
            duration=duration
        )
        with util.storage_errors('Create invitation'):
            session.add(db_invitation)
            try:
                session.flush()
            except IntegrityError as e:
                if util.violates(e, 'email'):
                    logger.debug('Address already has an invitation')
                    raise AlreadyInvited('Address is already invited') from e
                if util.violates(e, 'token'):
                    logger.error('Invitation token collision')
                    raise InvitationCreationFailed('Token collision') from e
                logger.error('Invitation creation failed: %s', e)
                raise StorageFailure('Storage unavailable') from e
        return _to_domain(db_invitation)

    def find_by_token(self, token: str) -> Optional[domain.Invitation]:
        """Get an invitation by token, or ``None``."""
        with util.storage_errors('Load invitation'):
            db_invitation = util.current_session().query(DBInvitation) \
                .filter(DBInvitation.token == token) \
                .first()
        if db_invitation is None:
            return None
        return _to_domain(db_invitation)

    def find_by_email(self, email: str) -> Optional[domain.Invitation]:
        """Get the invitation to an address, or ``None``."""
        with util.storage_errors('Load invitation'):
            db_invitation = util.current_session().query(DBInvitation) \
                .filter(DBInvitation.email == email) \
                .first()
        if db_invitation is None:
            return None
        return _to_domain(db_invitation)

    def find_by_id(self, invitation_id: str) -> Optional[domain.Invitation]:
        """Get an invitation by ID, or ``None``."""
        with util.storage_errors('Load invitation'):
            db_invitation = util.current_session() \
                .get(DBInvitation, invitation_id)
        if db_invitation is None:
            return None
        return _to_domain(db_invitation)

    def list_all(self) -> List[domain.Invitation]:
        """Get all invitations, oldest first."""
        with util.storage_errors('List invitations'):
            db_invitations = util.current_session().query(DBInvitation) \
                .order_by(DBInvitation.issued_at, DBInvitation.email) \
                .all()
        return [_to_domain(db_invitation) for db_invitation in db_invitations]

    def set_status(self, invitation_id: str,
                   status: domain.InvitationStatus,
                   pending_only: bool = False) \
            -> Optional[domain.Invitation]:
        """
        Change the status of an invitation in the current transaction.

        With ``pending_only``, the change is made in a single conditional
        update, so an invitation that left the pending state in the meantime
        is left alone.

        Returns
        -------
        :class:`.domain.Invitation` or None
            ``None`` if no (pending) invitation has this ID.

        """
        query = util.current_session().query(DBInvitation) \
            .filter(DBInvitation.invitation_id == invitation_id)
        if pending_only:
            query = query.filter(DBInvitation.status == _PENDING)
        with util.storage_errors('Update invitation'):
            updated = query.update({
                DBInvitation.status: status.value,
                DBInvitation.updated_at: util.now()
            }, synchronize_session=False)
            if not updated:
                return None
            db_invitation = util.current_session().get(
                DBInvitation, invitation_id, populate_existing=True
            )
        if db_invitation is None:
            return None
        return _to_domain(db_invitation)

    def delete_by_id(self, invitation_id: str,
                     pending_only: bool = False) -> int:
        """
        Delete an invitation. Deleting a missing invitation is a no-op.

        With ``pending_only``, an invitation that is no longer pending is not
        deleted, and 0 is returned.
        """
        query = util.current_session().query(DBInvitation) \
            .filter(DBInvitation.invitation_id == invitation_id)
        if pending_only:
            query = query.filter(DBInvitation.status == _PENDING)
        with util.storage_errors('Delete invitation'):
            return int(query.delete(synchronize_session=False))


def _to_domain(db_invitation: DBInvitation) -> domain.Invitation:
    return domain.Invitation(
        invitation_id=db_invitation.invitation_id,
        inviter_id=db_invitation.inviter_id,
        email=db_invitation.email,
        token=db_invitation.token,
        role=parse_role(db_invitation.role),
        start_time=util.from_epoch(db_invitation.issued_at),
        duration=db_invitation.duration,
        status=domain.InvitationStatus.parse(db_invitation.status)
    )
