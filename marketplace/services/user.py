"""
Profile operations for the signed-in user and public user lookups.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import UploadFile
from marketplace.repositories.user import UserRepository
from marketplace.models.user import User
from marketplace.schemas.user import ProfileUpdate
from marketplace.services.upload import UploadService
from marketplace.utils.exceptions import NotFoundError
from typing import Optional
import uuid
import logging

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db_session: AsyncSession, upload_service: Optional[UploadService] = None):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.upload_service = upload_service or UploadService()

    async def get_public_profile(self, user_id: uuid.UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """
        Apply the profile form. Names are always written; the notification
        preferences only when sent. An empty phone clears it.
        """
        changes = data.model_dump(exclude_unset=True)
        for flag in ("notify_email", "notify_phone"):
            if changes.get(flag) is None:
                changes.pop(flag, None)

        updated = await self.user_repo.update(user, changes)
        logger.info(f"Profile updated for user {user.id}")
        return updated

    async def set_avatar(self, user: User, file: UploadFile) -> User:
        url = await self.upload_service.store_image(file)
        return await self.user_repo.update(user, {"avatar": url})
