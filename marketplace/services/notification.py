"""
Notification service: creation helpers used by other services, plus the
pull endpoints' read, mark and delete operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.message import NotificationRepository
from marketplace.models.notification import Notification, NotificationType
from marketplace.models.user import User
from marketplace.utils.exceptions import NotFoundError, ForbiddenError
from typing import List, Optional, Sequence
import uuid
import logging

logger = logging.getLogger(__name__)


class NotificationService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.notification_repo = NotificationRepository(db_session)

    async def notify(
        self,
        user_id: uuid.UUID,
        notification_type: NotificationType,
        title: str,
        content: str,
        related_id: Optional[uuid.UUID] = None,
        commit: bool = True
    ) -> Notification:
        """Create one notification."""
        notification = await self.notification_repo.create(
            {
                "user_id": user_id,
                "type": notification_type,
                "title": title,
                "content": content,
                "related_id": related_id,
            },
            commit=commit,
        )
        logger.debug(f"{notification_type.value} notification for user {user_id}")
        return notification

    async def notify_many(
        self,
        user_ids: Sequence[uuid.UUID],
        notification_type: NotificationType,
        title: str,
        content: str,
        related_id: Optional[uuid.UUID] = None
    ) -> int:
        """Create the same notification for several users. Flushes only."""
        for user_id in user_ids:
            await self.notify(user_id, notification_type, title, content, related_id, commit=False)
        return len(user_ids)

    async def list_notifications(self, user: User, unread_only: bool = False) -> List[Notification]:
        return await self.notification_repo.list_for_user(user.id, unread_only=unread_only)

    async def unread_count(self, user: User) -> int:
        return await self.notification_repo.unread_count(user.id)

    async def mark_all_read(self, user: User) -> int:
        count = await self.notification_repo.mark_all_read(user.id)
        logger.info(f"Marked {count} notifications read for user {user.id}")
        return count

    async def delete_read(self, user: User) -> int:
        return await self.notification_repo.delete_read(user.id)

    async def set_read(self, notification_id: uuid.UUID, user: User, is_read: bool) -> Notification:
        """
        Change the read flag of one notification.

        Raises:
            NotFoundError: Unknown notification
            ForbiddenError: The notification belongs to someone else
        """
        notification = await self.notification_repo.get_by_id(notification_id)
        if not notification:
            raise NotFoundError("Notification", str(notification_id))
        if notification.user_id != user.id:
            raise ForbiddenError("You cannot modify this notification")

        return await self.notification_repo.update(notification, {"is_read": is_read})
