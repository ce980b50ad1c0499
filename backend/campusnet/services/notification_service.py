"""
Notification Service

Notifications are a side channel: they are written after the primary
change has been committed, and a failure here is rolled back and logged
but never retried and never surfaced to the caller.
"""

from typing import List, Optional, Dict, Any
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campusnet.core.logging_config import logger
from campusnet.models.notification import Notification, NotificationType
from campusnet.models.user import User


class NotificationService:
    """Best-effort writer and (feature-flagged) reader for notifications"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def notify(
        self,
        recipient_id: int,
        sender_id: int,
        notification_type: NotificationType,
        post_id: Optional[int] = None,
    ) -> bool:
        """Record a notification; returns False when skipped or failed"""
        if recipient_id == sender_id:
            return False

        try:
            self.db.add(Notification(
                recipient_id=recipient_id,
                sender_id=sender_id,
                post_id=post_id,
                type=notification_type,
            ))
            await self.db.commit()
            return True
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning(
                f"[Notifications] Failed to record {notification_type.value} "
                f"notification {sender_id} -> {recipient_id}: {e}"
            )
            return False

    async def list_for_recipient(self, recipient_id: int, limit: int = 50) -> List[Dict[str, Any]]:
        result = await self.db.execute(
            select(
                Notification.id,
                Notification.type,
                Notification.post_id,
                Notification.read,
                Notification.created_at,
                User.name.label("sender_name"),
                User.avatar_url.label("sender_avatar"),
                User.username.label("sender_username"),
            )
            .join(User, Notification.sender_id == User.id)
            .where(Notification.recipient_id == recipient_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        return [dict(row._mapping) for row in result]
