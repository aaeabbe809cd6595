"""Testing helpers for the core components."""

from typing import Any, List, NamedTuple, Optional

from ..domain import UserFullName
from ..exceptions import NotificationFailure
from ..factory import Services, build_services
from ..notifications import NotificationGateway

FAST_HASHING = {
    'ARGON2_TIME_COST': 1,
    'ARGON2_MEMORY_COST': 8,
    'ARGON2_PARALLELISM': 1
}

SECRET = 'at-least-8-chars'
NAME = UserFullName('Jane', 'Doe')


class Sent(NamedTuple):
    email: str
    token: str
    inviter_name: str


class RecordingGateway(NotificationGateway):
    """Keeps every invitation it is asked to send. Can be told to fail."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: List[Sent] = []

    def send_invitation(self, email: str, token: str,
                        inviter_name: str) -> None:
        if self.fail:
            raise NotificationFailure('Could not deliver invitation')
        self.sent.append(Sent(email, token, inviter_name))


def services(notifier: Optional[NotificationGateway] = None,
             **config: Any) -> Services:
    """Build the core components with cheap hashing. Needs an app context."""
    cfg = dict(FAST_HASHING, NOTIFICATION_BACKEND='log')
    cfg.update(config)
    if notifier is None:
        notifier = RecordingGateway()
    return build_services(cfg, notifier)
