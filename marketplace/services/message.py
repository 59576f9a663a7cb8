"""
Private messages between users, and saved (favorite) listings.
Both create notifications for the other party.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.message import MessageRepository, FavoriteRepository, NotificationRepository
from marketplace.repositories.user import UserRepository
from marketplace.repositories.listing import ListingRepository
from marketplace.models.message import Message
from marketplace.models.favorite import Favorite
from marketplace.models.notification import NotificationType
from marketplace.models.user import User
from marketplace.schemas.message import MessageCreate
from marketplace.services.notification import NotificationService
from marketplace.utils.exceptions import (
    APIException,
    BadRequestError,
    NotFoundError,
    ListingNotFoundError
)
from typing import Dict, List, Optional
import uuid
import logging

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 80


class MessageService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.message_repo = MessageRepository(db_session)
        self.notification_repo = NotificationRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.listing_repo = ListingRepository(db_session)
        self.notifications = NotificationService(db_session)

    async def send_message(self, data: MessageCreate, sender: User) -> Message:
        """
        Store a message and notify the receiver.

        Raises:
            BadRequestError: Sending to yourself
            NotFoundError: Unknown receiver
            ListingNotFoundError: Unknown listing
        """
        if data.receiver_id == sender.id:
            raise BadRequestError("You cannot send a message to yourself")

        receiver = await self.user_repo.get_by_id(data.receiver_id)
        if not receiver:
            raise NotFoundError("User", str(data.receiver_id))

        if data.listing_id and not await self.listing_repo.exists(data.listing_id):
            raise ListingNotFoundError(str(data.listing_id))

        sender_id = sender.id
        sender_name = sender.full_name or sender.email
        try:
            message = await self.message_repo.create(
                {
                    "sender_id": sender_id,
                    "receiver_id": receiver.id,
                    "listing_id": data.listing_id,
                    "content": data.content,
                },
                commit=False,
            )
            preview = data.content[:PREVIEW_LENGTH]
            await self.notifications.notify(
                receiver.id,
                NotificationType.MESSAGE,
                title=f"New message from {sender_name}",
                content=preview,
                related_id=message.id,
                commit=False,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Message from {sender_id} to {data.receiver_id} rolled back", exc_info=True)
            raise

        await self.db.refresh(message, ["sender", "receiver", "listing"])
        logger.info(f"Message {message.id} sent from {sender_id} to {data.receiver_id}")
        return message

    async def inbox(self, user: User) -> List[Message]:
        return await self.message_repo.inbox(user.id)

    async def sent(self, user: User) -> List[Message]:
        return await self.message_repo.sent(user.id)

    async def conversation(self, user: User, contact_id: uuid.UUID) -> List[Message]:
        return await self.message_repo.conversation(user.id, contact_id)

    async def unread_count(self, user: User) -> int:
        return await self.message_repo.unread_count(user.id)

    async def mark_read(self, message_id: uuid.UUID, user: User) -> Message:
        """Only the receiver can mark a message; anyone else gets a 404."""
        message = await self.message_repo.get_by_id(message_id)
        if not message or message.receiver_id != user.id or message.deleted_for_receiver:
            raise NotFoundError("Message", str(message_id))

        return await self.message_repo.update(message, {"is_read": True})

    async def delete_conversation(self, user: User, contact_id: uuid.UUID) -> Dict[str, int]:
        """
        Hide a conversation for the caller only. The contact keeps their copy.
        The caller's message notifications about it are removed.
        """
        user_id = user.id
        try:
            message_ids = await self.message_repo.conversation_ids(user_id, contact_id)
            hidden = await self.message_repo.hide_conversation(user_id, contact_id)
            removed = await self.notification_repo.delete_related(
                user_id, NotificationType.MESSAGE, message_ids
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Deleting conversation {user_id}/{contact_id} rolled back", exc_info=True)
            raise

        logger.info(f"User {user_id} hid {hidden} messages with {contact_id}")
        return {"messages_hidden": hidden, "notifications_removed": removed}


class FavoriteService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.favorite_repo = FavoriteRepository(db_session)
        self.listing_repo = ListingRepository(db_session)
        self.notifications = NotificationService(db_session)

    async def list_favorites(self, user: User) -> List[Favorite]:
        return await self.favorite_repo.list_for_user(user.id)

    async def add_favorite(self, listing_id: Optional[uuid.UUID], user: User) -> Favorite:
        """
        Save a listing for the user and tell the owner about it.

        Raises:
            BadRequestError: Missing listing id, or already saved
            ListingNotFoundError: Unknown listing
        """
        if listing_id is None:
            raise BadRequestError("listing_id is required")

        listing = await self.listing_repo.get_by_id(listing_id)
        if not listing:
            raise ListingNotFoundError(str(listing_id))

        if await self.favorite_repo.get_for_user(user.id, listing_id):
            raise BadRequestError("Listing is already in your favorites")

        user_id = user.id
        try:
            favorite = await self.favorite_repo.create(
                {"user_id": user_id, "listing_id": listing_id},
                commit=False,
            )
            if listing.user_id != user_id:
                await self.notifications.notify(
                    listing.user_id,
                    NotificationType.FAVORITE,
                    title="Listing saved",
                    content=f"Someone added \"{listing.title}\" to their favorites",
                    related_id=listing.id,
                    commit=False,
                )
            await self.db.commit()
        except APIException:
            await self.db.rollback()
            raise
        except Exception:
            await self.db.rollback()
            logger.error(f"Saving favorite {listing_id} for {user_id} rolled back", exc_info=True)
            raise

        await self.db.refresh(favorite, ["listing"])
        return favorite

    async def remove_favorite(self, listing_id: uuid.UUID, user: User) -> None:
        favorite = await self.favorite_repo.get_for_user(user.id, listing_id)
        if not favorite:
            raise NotFoundError("Favorite", str(listing_id))

        await self.favorite_repo.delete(favorite.id)
        logger.info(f"User {user.id} removed favorite {listing_id}")
