"""
Notification Service
Inbox queries and read-state changes for the calling user. A user sees
rows addressed to them plus broadcast rows (user_id NULL).
"""

from typing import Any, Dict
from sqlalchemy import delete, func, or_, select, update
from rigasset import db
from rigasset.business.core.errors import NotFoundError
from rigasset.business.core.unit_of_work import atomic
from rigasset.data.core.notification import Notification


class NotificationService:

    @staticmethod
    def _visible_to(user_id: int):
        return or_(Notification.user_id == user_id, Notification.user_id.is_(None))

    @classmethod
    def inbox(cls, user_id: int, unread_only: bool = False, limit: int = 50) -> Dict[str, Any]:
        stmt = select(Notification).where(cls._visible_to(user_id))
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
        items = [n.to_dict() for n in db.session.execute(stmt).scalars()]
        return {'notifications': items, 'unreadCount': cls.unread_count(user_id)}

    @classmethod
    def unread_count(cls, user_id: int) -> int:
        return db.session.execute(
            select(func.count(Notification.id))
            .where(cls._visible_to(user_id), Notification.is_read.is_(False))
        ).scalar_one()

    @classmethod
    def mark_read(cls, user_id: int, notification_id: int) -> None:
        with atomic():
            result = db.session.execute(
                update(Notification)
                .where(Notification.id == notification_id, cls._visible_to(user_id))
                .values(is_read=True)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError('Notification not found')

    @classmethod
    def mark_all_read(cls, user_id: int) -> int:
        with atomic():
            result = db.session.execute(
                update(Notification)
                .where(cls._visible_to(user_id), Notification.is_read.is_(False))
                .values(is_read=True)
                .execution_options(synchronize_session=False)
            )
        return result.rowcount

    @classmethod
    def delete(cls, user_id: int, notification_id: int) -> None:
        with atomic():
            result = db.session.execute(
                delete(Notification)
                .where(Notification.id == notification_id, cls._visible_to(user_id))
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError('Notification not found')

    @classmethod
    def clear_read(cls, user_id: int) -> int:
        with atomic():
            result = db.session.execute(
                delete(Notification)
                .where(cls._visible_to(user_id), Notification.is_read.is_(True))
                .execution_options(synchronize_session=False)
            )
        return result.rowcount
