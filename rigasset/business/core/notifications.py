"""
Notification emitter

Writes in-app notification rows, one per recipient for role notifications
and a single NULL-user row for broadcasts. Delivery to devices or mail is
out of scope; a row in ``notifications`` is the delivered notification.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, List, Optional
from rigasset import db
from rigasset.business.core.errors import PersistenceError
from rigasset.business.core.role_directory import RoleDirectory, SqlRoleDirectory
from rigasset.business.core.unit_of_work import atomic
from rigasset.data.core.notification import Notification
from rigasset.logger import get_logger

logger = get_logger("rigasset.domain.notifications")


@dataclass(frozen=True)
class NotificationPayload:
    title: str
    description: str
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None
    type: str = 'info'
    icon: str = 'bell'

    def build(self, user_id: Optional[int]) -> Notification:
        return Notification(
            user_id=user_id,
            type=self.type,
            icon=self.icon,
            title=self.title,
            description=self.description,
            entity_type=self.entity_type,
            entity_id=self.entity_id,
            is_read=False,
        )


class NotificationEmitter:
    """
    Adds notification rows to the current unit of work.

    Calls made inside an ``atomic()`` block commit or roll back with it.
    ``detached()`` opens a separate unit whose failure is logged and
    dropped, for notifications that must not undo the change they report.
    """

    def __init__(self, role_directory: RoleDirectory = None, session=None):
        self.session = session or db.session
        self.role_directory = role_directory or SqlRoleDirectory(self.session)

    def notify_role(self, role: str, payload: NotificationPayload) -> List[Notification]:
        return self.notify_roles([role], payload)

    def notify_roles(self, roles: Iterable[str], payload: NotificationPayload) -> List[Notification]:
        """One row per distinct user across ``roles``"""
        recipients = []
        for role in roles:
            for user_id in self.role_directory.users_with_role(role):
                if user_id not in recipients:
                    recipients.append(user_id)

        rows = [payload.build(user_id) for user_id in recipients]
        self.session.add_all(rows)
        self.session.flush()
        logger.debug(f"Queued '{payload.title}' for {len(rows)} user(s)")
        return rows

    def notify_broadcast(self, payload: NotificationPayload) -> Notification:
        row = payload.build(None)
        self.session.add(row)
        self.session.flush()
        logger.debug(f"Queued broadcast '{payload.title}'")
        return row

    @contextmanager
    def detached(self):
        try:
            with atomic(self.session):
                yield self
        except PersistenceError as e:
            logger.error(f"Notification not delivered: {e.message}", exc_info=e.__cause__ or e)
