"""
Notification model: typed, per-user messages fetched by polling.
"""

from sqlalchemy import String, Text, Boolean, ForeignKey, Index, Uuid, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from marketplace.database import Base
from typing import Optional
import enum
import uuid


class NotificationType(str, enum.Enum):
    MESSAGE = "MESSAGE"
    FAVORITE = "FAVORITE"
    PRICE_CHANGE = "PRICE_CHANGE"
    STATUS_UPDATE = "STATUS_UPDATE"
    SYSTEM = "SYSTEM"


class Notification(Base):
    """A notification addressed to one user."""

    __tablename__ = "notifications"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    type: Mapped[NotificationType] = mapped_column(
        SQLEnum(NotificationType),
        nullable=False,
        default=NotificationType.SYSTEM
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    related_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        comment="Id of the message or listing the notification refers to"
    )

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


Index("idx_notification_user_read", Notification.user_id, Notification.is_read)
