"""
Listing validation token repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from marketplace.repositories.base import BaseRepository
from marketplace.models.validation import ListingValidation
from marketplace.database import utcnow
from typing import Optional
import uuid


class ValidationRepository(BaseRepository[ListingValidation]):

    def __init__(self, db: AsyncSession):
        super().__init__(ListingValidation, db)

    async def find_usable(self, listing_id: uuid.UUID, token: str) -> Optional[ListingValidation]:
        """An unvalidated, unexpired record matching both listing and token."""
        result = await self.db.execute(
            select(ListingValidation).where(
                ListingValidation.listing_id == listing_id,
                ListingValidation.token == token,
                ListingValidation.validated.is_(False),
                ListingValidation.expires_at > utcnow(),
            )
        )
        return result.scalars().first()

    async def latest_for_listing(self, listing_id: uuid.UUID) -> Optional[ListingValidation]:
        result = await self.db.execute(
            select(ListingValidation)
            .where(ListingValidation.listing_id == listing_id)
            .order_by(ListingValidation.created_at.desc())
        )
        return result.scalars().first()
