"""
Message, favorite and notification repositories.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func, or_, and_, desc, asc
from marketplace.repositories.base import BaseRepository
from marketplace.models.message import Message
from marketplace.models.favorite import Favorite
from marketplace.models.notification import Notification, NotificationType
from typing import Optional, List, Sequence
import uuid
import logging

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[Message]):

    def __init__(self, db: AsyncSession):
        super().__init__(Message, db)

    async def inbox(self, user_id: uuid.UUID) -> List[Message]:
        """Received messages the user has not deleted, newest first."""
        result = await self.db.execute(
            select(Message)
            .where(Message.receiver_id == user_id, Message.deleted_for_receiver.is_(False))
            .order_by(desc(Message.created_at))
        )
        return list(result.scalars().all())

    async def sent(self, user_id: uuid.UUID) -> List[Message]:
        result = await self.db.execute(
            select(Message)
            .where(Message.sender_id == user_id, Message.deleted_for_sender.is_(False))
            .order_by(desc(Message.created_at))
        )
        return list(result.scalars().all())

    def _conversation_condition(self, user_id: uuid.UUID, contact_id: uuid.UUID):
        return or_(
            and_(Message.sender_id == user_id, Message.receiver_id == contact_id),
            and_(Message.sender_id == contact_id, Message.receiver_id == user_id),
        )

    async def conversation(self, user_id: uuid.UUID, contact_id: uuid.UUID) -> List[Message]:
        """Both directions of a conversation as seen by user_id, oldest first."""
        result = await self.db.execute(
            select(Message)
            .where(
                self._conversation_condition(user_id, contact_id),
                or_(
                    and_(Message.sender_id == user_id, Message.deleted_for_sender.is_(False)),
                    and_(Message.receiver_id == user_id, Message.deleted_for_receiver.is_(False)),
                ),
            )
            .order_by(asc(Message.created_at))
        )
        return list(result.scalars().all())

    async def conversation_ids(self, user_id: uuid.UUID, contact_id: uuid.UUID) -> List[uuid.UUID]:
        result = await self.db.execute(
            select(Message.id).where(self._conversation_condition(user_id, contact_id))
        )
        return list(result.scalars().all())

    async def unread_count(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count(Message.id)).where(
                Message.receiver_id == user_id,
                Message.is_read.is_(False),
                Message.deleted_for_receiver.is_(False),
            )
        )
        return result.scalar() or 0

    async def hide_conversation(self, user_id: uuid.UUID, contact_id: uuid.UUID) -> int:
        """
        Soft delete the user's side of a conversation. Flushes only.

        Returns:
            Number of messages touched
        """
        sent = await self.db.execute(
            update(Message)
            .where(Message.sender_id == user_id, Message.receiver_id == contact_id)
            .values(deleted_for_sender=True)
        )
        received = await self.db.execute(
            update(Message)
            .where(Message.sender_id == contact_id, Message.receiver_id == user_id)
            .values(deleted_for_receiver=True)
        )
        await self.db.flush()
        return sent.rowcount + received.rowcount

    async def delete_for_user(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(
            delete(Message).where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
        )
        return result.rowcount


class FavoriteRepository(BaseRepository[Favorite]):

    def __init__(self, db: AsyncSession):
        super().__init__(Favorite, db)

    async def get_for_user(self, user_id: uuid.UUID, listing_id: uuid.UUID) -> Optional[Favorite]:
        result = await self.db.execute(
            select(Favorite).where(Favorite.user_id == user_id, Favorite.listing_id == listing_id)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: uuid.UUID) -> List[Favorite]:
        result = await self.db.execute(
            select(Favorite).where(Favorite.user_id == user_id).order_by(desc(Favorite.created_at))
        )
        return list(result.scalars().all())

    async def user_ids_for_listing(self, listing_id: uuid.UUID) -> List[uuid.UUID]:
        result = await self.db.execute(select(Favorite.user_id).where(Favorite.listing_id == listing_id))
        return list(result.scalars().all())

    async def delete_for_user(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(delete(Favorite).where(Favorite.user_id == user_id))
        return result.rowcount


class NotificationRepository(BaseRepository[Notification]):

    def __init__(self, db: AsyncSession):
        super().__init__(Notification, db)

    async def list_for_user(self, user_id: uuid.UUID, unread_only: bool = False) -> List[Notification]:
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        result = await self.db.execute(query.order_by(desc(Notification.created_at)))
        return list(result.scalars().all())

    async def unread_count(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id, Notification.is_read.is_(False)
            )
        )
        return result.scalar() or 0

    async def mark_all_read(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        await self.db.commit()
        return result.rowcount

    async def delete_read(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(
            delete(Notification).where(Notification.user_id == user_id, Notification.is_read.is_(True))
        )
        await self.db.commit()
        return result.rowcount

    async def delete_related(
        self,
        user_id: uuid.UUID,
        notification_type: NotificationType,
        related_ids: Sequence[uuid.UUID]
    ) -> int:
        """Remove a user's notifications of one type pointing at related_ids. Flushes only."""
        if not related_ids:
            return 0
        result = await self.db.execute(
            delete(Notification).where(
                Notification.user_id == user_id,
                Notification.type == notification_type,
                Notification.related_id.in_(list(related_ids)),
            )
        )
        await self.db.flush()
        return result.rowcount

    async def delete_for_user(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(delete(Notification).where(Notification.user_id == user_id))
        return result.rowcount
