"""
ListingImage model: one normalized image record per listing picture.
"""

from sqlalchemy import String, Integer, Boolean, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from marketplace.database import Base
from typing import TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from marketplace.models.listing import Listing


class ListingImage(Base):
    """Image attached to a listing, with display order and primary flag."""

    __tablename__ = "listing_images"

    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    image_url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Public path or absolute URL of the image"
    )

    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    listing: Mapped["Listing"] = relationship("Listing", back_populates="images")

    def __repr__(self) -> str:
        return f"<ListingImage(listing_id={self.listing_id}, order={self.display_order}, primary={self.is_primary})>"


Index("idx_listing_image_primary", ListingImage.listing_id, ListingImage.is_primary)
