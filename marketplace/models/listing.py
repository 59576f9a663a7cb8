"""
Listing model: a classified advertisement with price, status and ordered images.
"""

from sqlalchemy import (
    String, Text, Numeric, Integer, Boolean, ForeignKey, Index, Uuid,
    Enum as SQLEnum
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from marketplace.database import Base
from decimal import Decimal
from typing import List, Optional, TYPE_CHECKING
import enum
import uuid

if TYPE_CHECKING:
    from marketplace.models.user import User
    from marketplace.models.category import Category
    from marketplace.models.location import Location
    from marketplace.models.image import ListingImage


class ListingStatus(str, enum.Enum):
    """Listing lifecycle status."""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Currency(str, enum.Enum):
    """Currencies a price can be stated in."""
    RON = "RON"
    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"


class ListingCondition(str, enum.Enum):
    """Condition of the advertised item."""
    NEW = "NEW"
    USED = "USED"
    REFURBISHED = "REFURBISHED"


class Listing(Base):
    """
    Listing model.

    A listing is owned by a user, belongs to a category and a location,
    and always carries at least one image.
    """

    __tablename__ = "listings"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    slug: Mapped[str] = mapped_column(
        String(320),
        unique=True,
        nullable=False,
        index=True,
        comment="URL identifier derived from the title"
    )

    description: Mapped[str] = mapped_column(Text, nullable=False)

    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, index=True)

    currency: Mapped[Currency] = mapped_column(
        SQLEnum(Currency),
        nullable=False,
        default=Currency.RON
    )

    condition: Mapped[ListingCondition] = mapped_column(
        SQLEnum(ListingCondition),
        nullable=False,
        default=ListingCondition.USED
    )

    negotiable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    status: Mapped[ListingStatus] = mapped_column(
        SQLEnum(ListingStatus),
        nullable=False,
        default=ListingStatus.PENDING,
        index=True
    )

    is_premium: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    views_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("categories.id"),
        nullable=False,
        index=True
    )

    location_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("locations.id"),
        nullable=False,
        index=True
    )

    # Relationships
    user: Mapped["User"] = relationship("User", lazy="selectin")
    category: Mapped["Category"] = relationship("Category", lazy="selectin")
    location: Mapped["Location"] = relationship("Location", lazy="selectin")

    images: Mapped[List["ListingImage"]] = relationship(
        "ListingImage",
        back_populates="listing",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ListingImage.display_order"
    )

    def __repr__(self) -> str:
        return f"<Listing(id={self.id}, slug={self.slug}, status={self.status})>"

    @property
    def is_active(self) -> bool:
        return self.status == ListingStatus.ACTIVE

    @property
    def primary_image_url(self) -> Optional[str]:
        """URL of the primary image, falling back to the first one."""
        for image in self.images:
            if image.is_primary:
                return image.image_url
        return self.images[0].image_url if self.images else None


# Indexes used by search and the admin back-office
Index("idx_listing_status_created", Listing.status, Listing.created_at)
Index("idx_listing_premium_status", Listing.is_premium, Listing.status)
Index("idx_listing_category_status", Listing.category_id, Listing.status)
