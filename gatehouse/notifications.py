"""Delivery of invitation messages."""

import logging
import smtplib
import ssl
from abc import ABC, abstractmethod
from email.message import EmailMessage
from typing import Any, Mapping, Optional

from .exceptions import NotificationFailure

logger = logging.getLogger(__name__)

SUBJECT = 'You have been invited'
BODY = """Hello,

{inviter_name} has invited you to join.

Your invitation token is: {token}

The invitation expires if it is not accepted in time.
"""


class NotificationGateway(ABC):
    """
    Sends invitations to their recipients.

    The core waits for each call to succeed or fail, and does not retry.
    """

    @abstractmethod
    def send_invitation(self, email: str, token: str,
                        inviter_name: str) -> None:
        """
        Deliver an invitation token to ``email``.

        Raises
        ------
        :class:`.NotificationFailure`

        """


class SMTPGateway(NotificationGateway):
    """Sends invitations by e-mail."""

    def __init__(self, host: str = '', port: int = 0, username: str = '',
                 password: str = '', sender: str = '',
                 timeout: float = 10.0) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._sender = sender
        self._timeout = timeout

    def _new_connection(self) -> smtplib.SMTP:
        if self._port == 465:
            return smtplib.SMTP_SSL(host=self._host, port=self._port,
                                    timeout=self._timeout,
                                    context=ssl.create_default_context())
        conn = smtplib.SMTP(host=self._host, port=self._port,
                            timeout=self._timeout)
        if self._port == 587:
            conn.starttls(context=ssl.create_default_context())
        return conn

    def build_message(self, email: str, token: str,
                      inviter_name: str) -> EmailMessage:
        """Compose the invitation message."""
        message = EmailMessage()
        message['From'] = self._sender
        message['To'] = email
        message['Subject'] = SUBJECT
        message.set_content(BODY.format(inviter_name=inviter_name,
                                        token=token))
        return message

    def send_invitation(self, email: str, token: str,
                        inviter_name: str) -> None:
        """Send the invitation over SMTP."""
        message = self.build_message(email, token, inviter_name)
        try:
            with self._new_connection() as conn:
                if self._username:
                    conn.login(self._username, self._password)
                conn.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error('Failed to send invitation via %s:%s: %s',
                         self._host, self._port, e)
            raise NotificationFailure('Could not deliver invitation') from e
        logger.info('Sent invitation to %s', email)


class LogGateway(NotificationGateway):
    """Pretends to send invitations. For development only."""

    def send_invitation(self, email: str, token: str,
                        inviter_name: str) -> None:
        """Record the delivery in the log, without the token."""
        logger.warning('Not sending invitation to %s from %s (log backend)',
                       email, inviter_name)


def get_gateway(config: Mapping[str, Any]) -> NotificationGateway:
    """Get the gateway selected by ``NOTIFICATION_BACKEND``."""
    backend: Optional[str] = config.get('NOTIFICATION_BACKEND', 'smtp')
    if backend == 'log':
        return LogGateway()
    if backend == 'smtp':
        return SMTPGateway(
            host=config.get('SMTP_HOST', 'localhost'),
            port=int(config.get('SMTP_PORT', 25)),
            username=config.get('SMTP_USERNAME', ''),
            password=config.get('SMTP_PASSWORD', ''),
            sender=config.get('SMTP_FROM', '')
        )
    raise ValueError(f'Unknown notification backend: {backend}')
