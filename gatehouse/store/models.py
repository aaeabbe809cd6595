"""Database models."""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, \
    Integer, String, UniqueConstraint, text
from sqlalchemy.orm import relationship
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class DBAnchor(db.Model):  # type: ignore
    """
    Identity anchors.

    +------------+-------------+------+-----+---------+
    | Field      | Type        | Null | Key | Default |
    +------------+-------------+------+-----+---------+
    | anchor_id  | varchar(36) | NO   | PRI | NULL    |
    | created_at | int(11)     | NO   |     | 0       |
    | updated_at | int(11)     | YES  |     | NULL    |
    +------------+-------------+------+-----+---------+
    """

    __tablename__ = 'anchors'

    anchor_id = Column(String(36), primary_key=True)
    created_at = Column(Integer, nullable=False, server_default=text("'0'"))
    updated_at = Column(Integer, nullable=True)


class DBUser(db.Model):  # type: ignore
    """Principals, i.e. anyone who can log in."""

    __tablename__ = 'users'
    __table_args__ = (
        UniqueConstraint('email', name='uq_users_email'),
    )

    user_id = Column(String(36), primary_key=True)
    anchor_id = Column(ForeignKey('anchors.anchor_id', ondelete='CASCADE'),
                       nullable=False, unique=True)
    email = Column(String(255), nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False)
    """Lowercase role name; see :class:`gatehouse.roles.Role`."""
    created_at = Column(Integer, nullable=False, server_default=text("'0'"))
    updated_at = Column(Integer, nullable=True)

    anchor = relationship('DBAnchor')


class DBSession(db.Model):  # type: ignore
    """
    Bearer sessions.

    +------------+--------------+------+-----+---------+
    | Field      | Type         | Null | Key | Default |
    +------------+--------------+------+-----+---------+
    | session_id | varchar(36)  | NO   | PRI | NULL    |
    | user_id    | varchar(36)  | NO   | MUL | NULL    |
    | token      | varchar(64)  | NO   | UNI | NULL    |
    | issued_at  | int(11)      | NO   |     | 0       |
    | duration   | int(11)      | NO   |     | NULL    |
    | user_agent | varchar(255) | YES  |     | NULL    |
    | ip_address | varchar(45)  | YES  |     | NULL    |
    +------------+--------------+------+-----+---------+
    """

    __tablename__ = 'sessions'
    __table_args__ = (
        UniqueConstraint('token', name='uq_sessions_token'),
        CheckConstraint('duration > 0', name='ck_sessions_duration'),
    )

    session_id = Column(String(36), primary_key=True)
    user_id = Column(ForeignKey('users.user_id', ondelete='CASCADE'),
                     nullable=False, index=True)
    token = Column(String(64), nullable=False)
    issued_at = Column(Integer, nullable=False, server_default=text("'0'"))
    """Epoch time."""
    duration = Column(Integer, nullable=False)
    """Seconds."""
    user_agent = Column(String(255), nullable=True)
    ip_address = Column(String(45), nullable=True)


class DBInvitation(db.Model):  # type: ignore
    """
    Pending offers to join.

    There is at most one row per address. An expired row is deleted before
    another invitation to the same address is written.
    """

    __tablename__ = 'invitations'
    __table_args__ = (
        UniqueConstraint('token', name='uq_invitations_token'),
        UniqueConstraint('email', name='uq_invitations_email'),
        CheckConstraint('duration > 0', name='ck_invitations_duration'),
        CheckConstraint(
            "status in ('pending', 'accepted', 'declined', 'revoked')",
            name='ck_invitations_status'
        ),
    )

    invitation_id = Column(String(36), primary_key=True)
    inviter_id = Column(ForeignKey('users.user_id', ondelete='CASCADE'),
                        nullable=False)
    email = Column(String(255), nullable=False)
    token = Column(String(64), nullable=False)
    role = Column(String(16), nullable=False)
    status = Column(String(16), nullable=False,
                    server_default=text("'pending'"))
    issued_at = Column(Integer, nullable=False, server_default=text("'0'"))
    duration = Column(Integer, nullable=False)
    updated_at = Column(Integer, nullable=True)


class DBAccount(db.Model):  # type: ignore
    """Accounts opened at registration. Ledger data lives elsewhere."""

    __tablename__ = 'accounts'

    account_id = Column(String(36), primary_key=True)
    owner_anchor_id = Column(ForeignKey('anchors.anchor_id',
                                        ondelete='CASCADE'),
                             nullable=False, index=True)
    balance_cents = Column(Integer, nullable=False,
                           server_default=text("'0'"))
    allow_overdraft = Column(Boolean, nullable=False,
                             server_default=text("'0'"))
    created_at = Column(Integer, nullable=False, server_default=text("'0'"))
