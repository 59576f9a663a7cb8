"""
Location model: a unique (county, city) pair shared by listings.
"""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from marketplace.database import Base


class Location(Base):
    """County and city of a listing."""

    __tablename__ = "locations"

    county: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("county", "city", name="uq_locations_county_city"),
    )

    def __repr__(self) -> str:
        return f"<Location({self.city}, {self.county})>"
