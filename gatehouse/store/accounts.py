"""Persistence for the accounts opened at registration."""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from .. import domain
from ..exceptions import StorageFailure
from . import util
from .models import DBAccount

logger = logging.getLogger(__name__)


class AccountStore(object):
    """Opens and looks up :class:`.domain.Account` records."""

    def create(self, owner_anchor_id: str,
               allow_overdraft: bool = False) -> domain.Account:
        """Add a zero-balance account to the current transaction."""
        session = util.current_session()
        db_account = DBAccount(
            account_id=util.new_id(),
            owner_anchor_id=owner_anchor_id,
            balance_cents=0,
            allow_overdraft=allow_overdraft,
            created_at=util.now()
        )
        with util.storage_errors('Create account'):
            session.add(db_account)
            try:
                session.flush()
            except IntegrityError as e:
                logger.error('Account creation failed: %s', e)
                raise StorageFailure('Storage unavailable') from e
        return _to_domain(db_account)

    def find_by_owner(self, anchor_id: str) -> Optional[domain.Account]:
        """Get the first account opened for an anchor, or ``None``."""
        with util.storage_errors('Load account'):
            db_account = util.current_session().query(DBAccount) \
                .filter(DBAccount.owner_anchor_id == anchor_id) \
                .order_by(DBAccount.created_at) \
                .first()
        if db_account is None:
            return None
        return _to_domain(db_account)

    def count(self) -> int:
        """Get the number of accounts."""
        with util.storage_errors('Count accounts'):
            return int(util.current_session().query(DBAccount).count())


def _to_domain(db_account: DBAccount) -> domain.Account:
    return domain.Account(
        account_id=db_account.account_id,
        owner_anchor_id=db_account.owner_anchor_id,
        balance=db_account.balance_cents,
        allow_overdraft=bool(db_account.allow_overdraft)
    )
