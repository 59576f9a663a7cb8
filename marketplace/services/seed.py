"""
Reference data seeding: the category tree and an optional admin account.
Both operations are idempotent.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.config import settings
from marketplace.data.categories import CATEGORY_TREE
from marketplace.models.category import Category
from marketplace.models.user import UserRole, UserStatus
from marketplace.repositories.category import CategoryRepository
from marketplace.repositories.user import UserRepository
from marketplace.services.category import category_cache
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


async def _upsert_category(
    repo: CategoryRepository,
    data: Dict[str, Any],
    order: int,
    parent: Optional[Category] = None
) -> Category:
    values = {
        "name": data["name"],
        "icon_name": data.get("icon_name"),
        "description": data.get("description"),
        "order": order,
        "parent_id": parent.id if parent else None,
        "is_active": True,
    }
    category = await repo.get_by_slug(data["slug"])
    if category:
        return await repo.update(category, values, commit=False)
    return await repo.create({"slug": data["slug"], **values}, commit=False)


async def seed_categories(db: AsyncSession, tree: Optional[List[Dict[str, Any]]] = None) -> int:
    """
    Insert or update every category of the tree, matched by slug.

    Returns:
        Number of categories written
    """
    repo = CategoryRepository(db)
    written = 0
    try:
        for position, main in enumerate(tree or CATEGORY_TREE):
            parent = await _upsert_category(repo, main, position)
            written += 1
            for sub_position, sub in enumerate(main.get("subcategories", [])):
                await _upsert_category(repo, sub, sub_position, parent)
                written += 1
        await db.commit()
    except Exception:
        await db.rollback()
        logger.error("Category seeding rolled back", exc_info=True)
        raise

    category_cache.invalidate()
    logger.info(f"Seeded {written} categories")
    return written


async def seed_admin(db: AsyncSession) -> bool:
    """
    Create the admin account from ``ADMIN_EMAIL``/``ADMIN_PASSWORD`` when both
    are set and the account does not exist yet.

    Returns:
        True when an account was created
    """
    if not settings.admin_email or not settings.admin_password:
        logger.info("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin account")
        return False

    repo = UserRepository(db)
    if await repo.get_by_email(settings.admin_email):
        logger.info(f"Admin account {settings.admin_email} already exists")
        return False

    await repo.create_user({
        "email": settings.admin_email,
        "password": settings.admin_password,
        "first_name": "Admin",
        "last_name": "",
        "role": UserRole.ADMIN,
        "status": UserStatus.ACTIVE,
        "email_verified": True,
    })
    logger.info(f"Admin account created: {settings.admin_email}")
    return True
