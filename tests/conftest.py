"""
Test configuration and fixtures for the marketplace API.
Every test gets a fresh in-memory SQLite database.
"""

import os
import tempfile

# Settings are read at import time
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="marketplace-uploads-"))
os.environ.setdefault("MAIL_BACKEND", "console")

import pytest
import uuid
from typing import AsyncGenerator, Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from marketplace.main import app
from marketplace.database import Base, get_db
from marketplace.models import (
    User,
    UserRole,
    UserStatus,
    Category,
    Listing,
    ListingStatus,
    ListingValidation
)
from marketplace.repositories.user import UserRepository
from marketplace.repositories.category import CategoryRepository, LocationRepository
from marketplace.repositories.listing import ListingRepository
from marketplace.services.category import category_cache
from marketplace.services.email import EmailResult, get_email_service
from marketplace.services.listing import normalize_images
from marketplace.utils.auth import create_access_token

TEST_PASSWORD = "testpassword123"


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session shared by fixtures and, through the get_db override, by requests."""
    session_factory = async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def reset_category_cache():
    category_cache.invalidate()
    yield
    category_cache.invalidate()


class RecordingEmailService:
    """Stands in for EmailService; remembers what would have been sent."""

    def __init__(self, success: bool = True):
        self.success = success
        self.sent = []

    async def send_validation_email(self, to, listing_title, listing_id, token) -> EmailResult:
        self.sent.append({"to": to, "listing_id": listing_id, "token": token})
        if self.success:
            return EmailResult(success=True)
        return EmailResult(success=False, error="SMTP server unavailable")


@pytest.fixture
def email_outbox() -> RecordingEmailService:
    return RecordingEmailService()


@pytest.fixture
async def async_client(db_session: AsyncSession, email_outbox: RecordingEmailService) -> AsyncGenerator[AsyncClient, None]:
    """Async test client bound to the test session."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: email_outbox

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Test data factories
class UserFactory:

    @staticmethod
    async def create_user(
        db: AsyncSession,
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        first_name: str = "Test",
        last_name: str = "User",
        role: UserRole = UserRole.USER,
        status: UserStatus = UserStatus.ACTIVE
    ) -> User:
        return await UserRepository(db).create_user({
            "email": email or f"user{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
            "role": role,
            "status": status,
        })


class CategoryFactory:

    @staticmethod
    async def create_category(
        db: AsyncSession,
        name: str = "Electronice",
        slug: Optional[str] = None,
        parent: Optional[Category] = None,
        order: int = 0
    ) -> Category:
        return await CategoryRepository(db).create({
            "name": name,
            "slug": slug or f"cat-{uuid.uuid4().hex[:8]}",
            "parent_id": parent.id if parent else None,
            "order": order,
            "is_active": True,
        })


class ListingFactory:
    """Inserts listings directly, bypassing the submission workflow."""

    @staticmethod
    async def create_listing(
        db: AsyncSession,
        user: User,
        category: Category,
        title: str = "Laptop Lenovo ThinkPad",
        price: Decimal = Decimal("1500.00"),
        status: ListingStatus = ListingStatus.ACTIVE,
        county: str = "Cluj",
        city: str = "Cluj-Napoca",
        is_premium: bool = False,
        validated: bool = True,
        views_count: int = 0
    ) -> Listing:
        location = await LocationRepository(db).get_or_create(county, city)
        repo = ListingRepository(db)
        listing = await repo.create({
            "title": title,
            "slug": f"{uuid.uuid4().hex[:12]}",
            "description": f"{title} in very good condition",
            "price": price,
            "status": status,
            "is_premium": is_premium,
            "views_count": views_count,
            "user_id": user.id,
            "category_id": category.id,
            "location_id": location.id,
        }, commit=False)
        await repo.add_images(listing.id, normalize_images([]))
        db.add(ListingValidation.issue(listing.id, ttl_hours=24, validated=validated))
        await db.commit()
        return await repo.get_with_details(listing.id)


def listing_payload(category_id: uuid.UUID, **overrides) -> dict:
    payload = {
        "title": "Bicicletă de munte",
        "description": "Bicicletă de munte, roți 29, puțin folosită",
        "price": "1200",
        "currency": "RON",
        "condition": "USED",
        "category_id": str(category_id),
        "county": "Cluj",
        "city": "Cluj-Napoca",
    }
    payload.update(overrides)
    return payload


def auth_headers(user: User) -> dict:
    token = create_access_token(user_id=user.id, email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}


# Common fixtures
@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(db_session, email="seller@example.com", first_name="Ana", last_name="Pop")


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(db_session, email="buyer@example.com", first_name="Ion", last_name="Ionescu")


@pytest.fixture
async def test_admin(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(db_session, email="admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
async def test_moderator(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(db_session, email="moderator@example.com", role=UserRole.MODERATOR)


@pytest.fixture
async def test_category(db_session: AsyncSession) -> Category:
    return await CategoryFactory.create_category(db_session, name="Electronice", slug="electronice")


@pytest.fixture
async def test_subcategory(db_session: AsyncSession, test_category: Category) -> Category:
    return await CategoryFactory.create_category(db_session, name="Laptopuri", slug="laptopuri", parent=test_category)


@pytest.fixture
async def test_listing(db_session: AsyncSession, test_user: User, test_subcategory: Category) -> Listing:
    return await ListingFactory.create_listing(db_session, test_user, test_subcategory)
