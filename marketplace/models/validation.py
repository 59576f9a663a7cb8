"""
ListingValidation model: single-use token confirming an anonymously submitted listing.
"""

from sqlalchemy import String, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from marketplace.database import Base, utcnow
from datetime import datetime, timedelta, timezone
import secrets
import uuid


def generate_validation_token() -> str:
    """64 hex characters of randomness."""
    return secrets.token_hex(32)


class ListingValidation(Base):
    """Emailed validation token with an expiry and a validated flag."""

    __tablename__ = "listing_validations"

    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    validated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @classmethod
    def issue(cls, listing_id: uuid.UUID, ttl_hours: int, validated: bool = False) -> "ListingValidation":
        """Build a new record with a fresh token expiring after ttl_hours."""
        return cls(
            listing_id=listing_id,
            token=generate_validation_token(),
            expires_at=utcnow() + timedelta(hours=ttl_hours),
            validated=validated,
        )

    def is_expired(self, now: datetime = None) -> bool:
        now = now or utcnow()
        expires_at = self.expires_at
        # SQLite hands back naive datetimes
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= now
