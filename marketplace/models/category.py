"""
Category model. Categories form a two-level tree through parent_id.
"""

from sqlalchemy import String, Integer, Boolean, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from marketplace.database import Base
from typing import Optional
import uuid


class Category(Base):
    """Listing category; main categories have no parent."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(150), nullable=False)

    slug: Mapped[str] = mapped_column(
        String(150),
        unique=True,
        nullable=False,
        index=True,
        comment="Globally unique URL identifier"
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    def __repr__(self) -> str:
        return f"<Category(slug={self.slug}, parent_id={self.parent_id})>"

    @property
    def is_main(self) -> bool:
        return self.parent_id is None
