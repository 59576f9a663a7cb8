"""
Message model for user-to-user conversations, optionally about a listing.
"""

from sqlalchemy import Text, Boolean, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from marketplace.database import Base
from typing import Optional, TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from marketplace.models.user import User
    from marketplace.models.listing import Listing


class Message(Base):
    """
    A single message. Each side can hide it independently through the
    deleted_for_sender / deleted_for_receiver flags.
    """

    __tablename__ = "messages"

    sender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    receiver_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    listing_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deleted_for_sender: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deleted_for_receiver: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    sender: Mapped["User"] = relationship("User", foreign_keys=[sender_id], lazy="selectin")
    receiver: Mapped["User"] = relationship("User", foreign_keys=[receiver_id], lazy="selectin")
    listing: Mapped[Optional["Listing"]] = relationship("Listing", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, sender={self.sender_id}, receiver={self.receiver_id})>"

    def is_visible_to(self, user_id: uuid.UUID) -> bool:
        if user_id == self.sender_id:
            return not self.deleted_for_sender
        if user_id == self.receiver_id:
            return not self.deleted_for_receiver
        return False


Index("idx_message_receiver_read", Message.receiver_id, Message.is_read)
Index("idx_message_pair", Message.sender_id, Message.receiver_id)
