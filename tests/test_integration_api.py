"""
Integration tests for the API endpoints.
Full request/response cycles through the ASGI app against an in-memory database.
"""

import pytest
import io
import uuid
from httpx import AsyncClient
from fastapi import status
from PIL import Image as PILImage

from marketplace.models import User, Category, Listing, ListingStatus
from tests.conftest import ListingFactory, listing_payload, auth_headers, TEST_PASSWORD

pytestmark = pytest.mark.integration


class TestAuthenticationEndpoints:
    """Registration, login, refresh and the current user."""

    @pytest.mark.asyncio
    async def test_register(self, async_client: AsyncClient):
        payload = {
            "first_name": "Maria",
            "last_name": "Popescu",
            "email": "Maria@Example.com",
            "password": "parola123",
        }
        response = await async_client.post("/api/auth/register", json=payload)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["email"] == "maria@example.com"
        assert data["role"] == "USER"
        assert "hashed_password" not in data

        duplicate = await async_client.post("/api/auth/register", json=payload)
        assert duplicate.status_code == status.HTTP_409_CONFLICT
        assert duplicate.json()["error"]["code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_register_weak_password(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/register", json={
            "first_name": "Maria",
            "last_name": "Popescu",
            "email": "maria@example.com",
            "password": "onlyletters",
        })
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_login_me_and_refresh(self, async_client: AsyncClient, test_user: User):
        response = await async_client.post(
            "/api/auth/login", json={"email": test_user.email, "password": TEST_PASSWORD}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == test_user.email
        assert data["user"]["last_login"] is not None

        headers = {"Authorization": f"Bearer {data['access_token']}"}
        me = await async_client.get("/api/auth/me", headers=headers)
        assert me.status_code == status.HTTP_200_OK
        assert me.json()["id"] == str(test_user.id)

        refreshed = await async_client.post("/api/auth/refresh", json={"refresh_token": data["refresh_token"]})
        assert refreshed.status_code == status.HTTP_200_OK
        assert refreshed.json()["access_token"]

    @pytest.mark.asyncio
    async def test_login_invalid_credentials(self, async_client: AsyncClient, test_user: User):
        response = await async_client.post(
            "/api/auth/login", json={"email": test_user.email, "password": "wrongpassword1"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_me_requires_token(self, async_client: AsyncClient):
        assert (await async_client.get("/api/auth/me")).status_code == status.HTTP_401_UNAUTHORIZED

        response = await async_client.get("/api/auth/me", headers={"Authorization": "Bearer invalid_token"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestListingSubmission:
    """Publishing listings with and without an account."""

    @pytest.mark.asyncio
    async def test_authenticated_listing_is_published(
        self, async_client: AsyncClient, test_user: User, test_subcategory: Category, email_outbox
    ):
        response = await async_client.post(
            "/api/listings",
            json=listing_payload(test_subcategory.id, images=[{"url": "uploads/bike.jpg"}]),
            headers=auth_headers(test_user)
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["requires_validation"] is False
        assert data["listing"]["status"] == "ACTIVE"
        assert data["listing"]["slug"] == "bicicleta-de-munte"
        assert data["listing"]["user"]["email"] == test_user.email
        assert data["listing"]["primary_image_url"] == "/uploads/bike.jpg"
        assert data["listing"]["formatted_price"] == "1.200 lei"
        assert email_outbox.sent == []

    @pytest.mark.asyncio
    async def test_anonymous_listing_then_validation_link(
        self, async_client: AsyncClient, test_subcategory: Category, email_outbox
    ):
        response = await async_client.post(
            "/api/listings", json=listing_payload(test_subcategory.id, email="nou@example.com")
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["requires_validation"] is True
        assert data["email_sent"] is True
        assert data["listing"]["status"] == "PENDING"

        sent = email_outbox.sent[0]
        assert sent["to"] == "nou@example.com"

        params = {"id": data["listing"]["id"], "token": sent["token"]}
        validated = await async_client.get("/api/listings/validate", params=params)
        assert validated.status_code == status.HTTP_200_OK
        assert validated.json()["slug"] == data["listing"]["slug"]

        again = await async_client.get("/api/listings/validate", params=params)
        assert again.status_code == status.HTTP_400_BAD_REQUEST

        listing = await async_client.get(f"/api/listings/{data['listing']['slug']}")
        assert listing.json()["status"] == "ACTIVE"

    @pytest.mark.asyncio
    async def test_validation_by_post(self, async_client: AsyncClient, test_subcategory: Category, email_outbox):
        created = await async_client.post(
            "/api/listings", json=listing_payload(test_subcategory.id, email="nou@example.com")
        )
        listing_id = created.json()["listing"]["id"]

        response = await async_client.post(
            "/api/listings/validate", json={"id": listing_id, "token": email_outbox.sent[0]["token"]}
        )
        assert response.status_code == status.HTTP_200_OK

    @pytest.mark.asyncio
    async def test_validation_errors(self, async_client: AsyncClient):
        missing = await async_client.get("/api/listings/validate")
        assert missing.status_code == status.HTTP_400_BAD_REQUEST

        unknown = await async_client.get(
            "/api/listings/validate", params={"id": str(uuid.uuid4()), "token": "a" * 64}
        )
        assert unknown.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_anonymous_listing_requires_email(self, async_client: AsyncClient, test_subcategory: Category):
        response = await async_client.post("/api/listings", json=listing_payload(test_subcategory.id))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Email is required" in response.json()["error"]["message"]

    @pytest.mark.asyncio
    async def test_invalid_payload(self, async_client: AsyncClient, test_user: User, test_subcategory: Category):
        response = await async_client.post(
            "/api/listings",
            json=listing_payload(test_subcategory.id, price="-5", title="ab"),
            headers=auth_headers(test_user)
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        fields = {detail["field"] for detail in response.json()["error"]["details"]}
        assert "body -> price" in fields
        assert "body -> title" in fields


class TestListingEndpoints:
    """Reading, editing, status changes and deletion."""

    @pytest.mark.asyncio
    async def test_get_by_slug_with_display_currency(self, async_client: AsyncClient, test_listing: Listing):
        response = await async_client.get(f"/api/listings/{test_listing.slug}", params={"currency": "EUR"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["price"] == 1500.0
        assert data["currency"] == "RON"
        assert data["display_price"] == 300.0
        assert data["formatted_price"] == "€300"
        assert data["category"]["slug"] == "laptopuri"
        assert data["location"]["city"] == "Cluj-Napoca"

    @pytest.mark.asyncio
    async def test_unknown_slug_and_currency(self, async_client: AsyncClient, test_listing: Listing):
        assert (await async_client.get("/api/listings/nu-exista")).status_code == status.HTTP_404_NOT_FOUND

        response = await async_client.get(f"/api/listings/{test_listing.slug}", params={"currency": "JPY"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_views_counter(self, async_client: AsyncClient, test_listing: Listing):
        listing_id = test_listing.id
        first = await async_client.post(f"/api/listings/view/{listing_id}")
        second = await async_client.post(f"/api/listings/view/{listing_id}")

        assert first.json()["views_count"] == 1
        assert second.json()["views_count"] == 2

        missing = await async_client.post(f"/api/listings/view/{uuid.uuid4()}")
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_owner_updates_listing(self, async_client: AsyncClient, test_listing: Listing, test_user: User):
        response = await async_client.put(
            f"/api/listings/{test_listing.slug}",
            json={"title": "Laptop Lenovo ca nou", "price": "1300", "county": "Bihor", "city": "Oradea"},
            headers=auth_headers(test_user)
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["title"] == "Laptop Lenovo ca nou"
        assert data["slug"] == test_listing.slug
        assert data["price"] == 1300.0
        assert data["location"]["county"] == "Bihor"

    @pytest.mark.asyncio
    async def test_update_permissions(
        self, async_client: AsyncClient, test_listing: Listing, other_user: User, test_admin: User
    ):
        slug = test_listing.slug

        anonymous = await async_client.put(f"/api/listings/{slug}", json={"title": "Titlu nou"})
        assert anonymous.status_code == status.HTTP_401_UNAUTHORIZED

        stranger = await async_client.put(
            f"/api/listings/{slug}", json={"title": "Titlu nou"}, headers=auth_headers(other_user)
        )
        assert stranger.status_code == status.HTTP_403_FORBIDDEN

        admin = await async_client.put(
            f"/api/listings/{slug}", json={"title": "Titlu nou"}, headers=auth_headers(test_admin)
        )
        assert admin.status_code == status.HTTP_200_OK

    @pytest.mark.asyncio
    async def test_update_requires_county_with_city(
        self, async_client: AsyncClient, test_listing: Listing, test_user: User
    ):
        response = await async_client.put(
            f"/api/listings/{test_listing.slug}", json={"city": "Oradea"}, headers=auth_headers(test_user)
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_update_rejects_blank_text(
        self, async_client: AsyncClient, test_listing: Listing, test_user: User
    ):
        headers = auth_headers(test_user)
        for body in ({"title": "   "}, {"description": "          \n  "}):
            response = await async_client.put(f"/api/listings/{test_listing.slug}", json=body, headers=headers)
            assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

        trimmed = await async_client.put(
            f"/api/listings/{test_listing.slug}", json={"title": "  Laptop Lenovo nou  "}, headers=headers
        )
        assert trimmed.status_code == status.HTTP_200_OK
        assert trimmed.json()["title"] == "Laptop Lenovo nou"

    @pytest.mark.asyncio
    async def test_status_toggle(self, async_client: AsyncClient, test_listing: Listing, test_user: User):
        headers = auth_headers(test_user)
        slug = test_listing.slug

        response = await async_client.patch(f"/api/listings/{slug}/status", json={"status": "INACTIVE"}, headers=headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "INACTIVE"

        response = await async_client.patch(f"/api/listings/{slug}/status", json={"status": "PENDING"}, headers=headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_pending_listing_cannot_be_activated_by_owner(
        self, async_client: AsyncClient, db_session, test_user: User, test_subcategory: Category
    ):
        listing = await ListingFactory.create_listing(
            db_session, test_user, test_subcategory, status=ListingStatus.PENDING, validated=False
        )
        response = await async_client.patch(
            f"/api/listings/{listing.slug}/status", json={"status": "ACTIVE"}, headers=auth_headers(test_user)
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_delete(self, async_client: AsyncClient, test_listing: Listing, test_user: User):
        slug = test_listing.slug
        response = await async_client.delete(f"/api/listings/{slug}", headers=auth_headers(test_user))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["success"] is True
        assert (await async_client.get(f"/api/listings/{slug}")).status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_ownership(self, async_client: AsyncClient, test_listing: Listing, test_user: User, other_user: User):
        slug = test_listing.slug

        owner = await async_client.get(f"/api/listings/{slug}/ownership", headers=auth_headers(test_user))
        assert owner.json() == {"is_owner": True, "can_edit": True}

        stranger = await async_client.get(f"/api/listings/{slug}/ownership", headers=auth_headers(other_user))
        assert stranger.json() == {"is_owner": False, "can_edit": False}

        anonymous = await async_client.get(f"/api/listings/{slug}/ownership")
        assert anonymous.json() == {"is_owner": False, "can_edit": False}

    @pytest.mark.asyncio
    async def test_mine_and_premium(
        self, async_client: AsyncClient, db_session, test_listing: Listing, test_user: User, test_subcategory: Category
    ):
        await ListingFactory.create_listing(
            db_session, test_user, test_subcategory, title="Laptop premium", is_premium=True
        )

        mine = await async_client.get("/api/listings/mine", headers=auth_headers(test_user))
        assert mine.status_code == status.HTTP_200_OK
        assert len(mine.json()["listings"]) == 2

        premium = await async_client.get("/api/listings/premium")
        assert [item["title"] for item in premium.json()["listings"]] == ["Laptop premium"]

        assert (await async_client.get("/api/listings/mine")).status_code == status.HTTP_401_UNAUTHORIZED


class TestSearchEndpoint:

    @pytest.mark.asyncio
    async def test_search_filters(self, async_client: AsyncClient, test_listing: Listing):
        response = await async_client.get("/api/search", params={"query": "lenovo", "category": "electronice"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 1
        assert data["listings"][0]["id"] == str(test_listing.id)

        empty = await async_client.get("/api/search", params={"min_price": "2000"})
        assert empty.json()["total"] == 0

        everything = await async_client.get("/api/search", params={"category": "toate"})
        assert everything.json()["total"] == 1

        camel_case = await async_client.get("/api/search", params={"minPrice": "2000", "sortBy": "price_asc"})
        assert camel_case.status_code == status.HTTP_200_OK
        assert camel_case.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_search_display_currency(self, async_client: AsyncClient, test_listing: Listing):
        response = await async_client.get("/api/search", params={"currency": "usd"})
        assert response.json()["listings"][0]["display_currency"] == "USD"

    @pytest.mark.asyncio
    async def test_invalid_prices(self, async_client: AsyncClient):
        response = await async_client.get("/api/search", params={"min_price": "abc"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "BAD_REQUEST"

        response = await async_client.get("/api/search", params={"min_price": "500", "max_price": "100"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = await async_client.get("/api/search", params={"minPrice": "500", "maxPrice": "100"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "BAD_REQUEST"


class TestReferenceData:
    """Categories, locations and currency helpers."""

    @pytest.mark.asyncio
    async def test_categories(self, async_client: AsyncClient, test_category: Category, test_subcategory: Category):
        response = await async_client.get("/api/categories")
        assert response.status_code == status.HTTP_200_OK
        assert {c["slug"] for c in response.json()["categories"]} == {"electronice", "laptopuri"}

        main = await async_client.get("/api/categories", params={"main_only": "true"})
        assert [c["slug"] for c in main.json()["categories"]] == ["electronice"]

        by_slug = await async_client.get("/api/categories", params={"slug": "laptopuri"})
        assert by_slug.json()["categories"][0]["parent_id"] == str(test_category.id)

        tree = await async_client.get("/api/categories/tree")
        node = tree.json()["categories"][0]
        assert node["slug"] == "electronice"
        assert [sub["slug"] for sub in node["subcategories"]] == ["laptopuri"]

    @pytest.mark.asyncio
    async def test_locations(self, async_client: AsyncClient):
        response = await async_client.get("/api/locations")
        counties = {item["county"]: item["cities"] for item in response.json()}
        assert "Cluj-Napoca" in counties["Cluj"]

        cities = await async_client.get("/api/locations/Cluj/cities")
        assert cities.status_code == status.HTTP_200_OK
        assert cities.json()["county"] == "Cluj"

        unknown = await async_client.get("/api/locations/Atlantida/cities")
        assert unknown.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_currency(self, async_client: AsyncClient):
        rates = await async_client.get("/api/currency/rates")
        assert rates.json()["rates"]["EUR"]["RON"] == 5.0
        assert rates.json()["symbols"]["RON"] == "lei"

        converted = await async_client.get(
            "/api/currency/convert", params={"amount": 100, "from_currency": "eur", "to_currency": "RON"}
        )
        assert converted.status_code == status.HTTP_200_OK
        assert converted.json()["converted"] == 500.0
        assert converted.json()["formatted"] == "500 lei"

        unsupported = await async_client.get(
            "/api/currency/convert", params={"amount": 100, "from_currency": "JPY", "to_currency": "RON"}
        )
        assert unsupported.status_code == status.HTTP_400_BAD_REQUEST

        for amount in ("inf", "nan", "1e30"):
            out_of_range = await async_client.get(
                "/api/currency/convert", params={"amount": amount, "from_currency": "EUR", "to_currency": "RON"}
            )
            assert out_of_range.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
            assert out_of_range.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_placeholder(self, async_client: AsyncClient):
        response = await async_client.get("/api/placeholder/300/200")

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"] == "image/png"
        assert PILImage.open(io.BytesIO(response.content)).size == (300, 200)

        clamped = await async_client.get("/api/placeholder/5000/10")
        assert PILImage.open(io.BytesIO(clamped.content)).size == (2000, 10)


class TestMessagingEndpoints:
    """Messages, notifications and favorites between two users."""

    @pytest.mark.asyncio
    async def test_message_flow(
        self, async_client: AsyncClient, test_listing: Listing, test_user: User, other_user: User
    ):
        seller, buyer = auth_headers(test_user), auth_headers(other_user)
        seller_id, buyer_id = str(test_user.id), str(other_user.id)

        sent = await async_client.post("/api/messages", json={
            "receiver_id": seller_id,
            "listing_id": str(test_listing.id),
            "content": "Mai este disponibil?",
        }, headers=buyer)
        assert sent.status_code == status.HTTP_201_CREATED
        message = sent.json()
        assert message["listing"]["slug"] == test_listing.slug
        assert "email" not in message["sender"]

        assert (await async_client.get("/api/messages/unread-count", headers=seller)).json() == {"unread": 1}

        inbox = await async_client.get("/api/messages/inbox", headers=seller)
        assert [m["id"] for m in inbox.json()["messages"]] == [message["id"]]

        outbox = await async_client.get("/api/messages/sent", headers=buyer)
        assert len(outbox.json()["messages"]) == 1

        read = await async_client.put(f"/api/messages/{message['id']}/read", headers=seller)
        assert read.json()["is_read"] is True

        await async_client.post("/api/messages", json={"receiver_id": buyer_id, "content": "Da"}, headers=seller)
        conversation = await async_client.get(f"/api/messages/conversation/{buyer_id}", headers=seller)
        assert [m["content"] for m in conversation.json()["messages"]] == ["Mai este disponibil?", "Da"]

        deleted = await async_client.delete(f"/api/messages/conversation/{buyer_id}", headers=seller)
        assert deleted.json()["messages_hidden"] == 2

        mine = await async_client.get(f"/api/messages/conversation/{buyer_id}", headers=seller)
        theirs = await async_client.get(f"/api/messages/conversation/{seller_id}", headers=buyer)
        assert mine.json()["messages"] == []
        assert len(theirs.json()["messages"]) == 2

    @pytest.mark.asyncio
    async def test_message_to_self(self, async_client: AsyncClient, test_user: User):
        response = await async_client.post(
            "/api/messages", json={"receiver_id": str(test_user.id), "content": "Salut"}, headers=auth_headers(test_user)
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_notifications(self, async_client: AsyncClient, test_user: User, other_user: User):
        seller = auth_headers(test_user)
        await async_client.post(
            "/api/messages", json={"receiver_id": str(test_user.id), "content": "Salut"}, headers=auth_headers(other_user)
        )

        listed = await async_client.get("/api/notifications", headers=seller)
        assert listed.json()["unread"] == 1
        notification = listed.json()["notifications"][0]
        assert notification["type"] == "MESSAGE"

        unread = await async_client.put(
            f"/api/notifications/{notification['id']}", json={"is_read": False}, headers=seller
        )
        assert unread.json()["is_read"] is False

        forbidden = await async_client.put(
            f"/api/notifications/{notification['id']}", json={"is_read": True}, headers=auth_headers(other_user)
        )
        assert forbidden.status_code == status.HTTP_403_FORBIDDEN

        assert (await async_client.put("/api/notifications", headers=seller)).json()["affected"] == 1
        assert (await async_client.get("/api/notifications/unread-count", headers=seller)).json() == {"unread": 0}
        assert (await async_client.delete("/api/notifications", headers=seller)).json()["affected"] == 1

    @pytest.mark.asyncio
    async def test_favorites(self, async_client: AsyncClient, test_listing: Listing, test_user: User, other_user: User):
        buyer = auth_headers(other_user)
        listing_id = str(test_listing.id)

        added = await async_client.post("/api/favorites", json={"listing_id": listing_id}, headers=buyer)
        assert added.status_code == status.HTTP_201_CREATED
        assert added.json()["listing"]["id"] == listing_id

        duplicate = await async_client.post("/api/favorites", json={"listing_id": listing_id}, headers=buyer)
        assert duplicate.status_code == status.HTTP_400_BAD_REQUEST

        missing = await async_client.post("/api/favorites", json={}, headers=buyer)
        assert missing.status_code == status.HTTP_400_BAD_REQUEST

        favorites = await async_client.get("/api/favorites", headers=buyer)
        assert len(favorites.json()["favorites"]) == 1

        owner_notifications = await async_client.get("/api/notifications", headers=auth_headers(test_user))
        assert owner_notifications.json()["notifications"][0]["type"] == "FAVORITE"

        removed = await async_client.delete(f"/api/favorites/{listing_id}", headers=buyer)
        assert removed.status_code == status.HTTP_200_OK
        assert (await async_client.delete(f"/api/favorites/{listing_id}", headers=buyer)).status_code == 404


class TestUserEndpoints:

    @pytest.mark.asyncio
    async def test_public_profile(self, async_client: AsyncClient, test_user: User):
        response = await async_client.get(f"/api/users/{test_user.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["first_name"] == "Ana"
        assert "email" not in response.json()

        assert (await async_client.get(f"/api/users/{uuid.uuid4()}")).status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_profile_update(self, async_client: AsyncClient, test_user: User):
        headers = auth_headers(test_user)
        response = await async_client.put("/api/user/profile", json={
            "first_name": "Ana Maria",
            "last_name": "Pop",
            "phone": "0712345678",
            "city": "Cluj-Napoca",
            "notify_phone": True,
        }, headers=headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["first_name"] == "Ana Maria"
        assert data["phone"] == "0712345678"
        assert data["notify_phone"] is True
        assert data["notify_email"] is True

        bad_phone = await async_client.put(
            "/api/user/profile", json={"first_name": "Ana", "last_name": "Pop", "phone": "12"}, headers=headers
        )
        assert bad_phone.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

        profile = await async_client.get("/api/user/profile", headers=headers)
        assert profile.json()["first_name"] == "Ana Maria"


class TestAdminEndpoints:

    @pytest.mark.asyncio
    async def test_dashboard_access(
        self, async_client: AsyncClient, test_listing: Listing, test_admin: User, test_moderator: User
    ):
        response = await async_client.get("/api/admin/dashboard", headers=auth_headers(test_admin))
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["active_listings"] == 1

        moderator = await async_client.get("/api/admin/dashboard", headers=auth_headers(test_moderator))
        assert moderator.status_code == status.HTTP_403_FORBIDDEN

        anonymous = await async_client.get("/api/admin/dashboard")
        assert anonymous.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_moderation(
        self, async_client: AsyncClient, db_session, test_listing: Listing, test_user: User,
        test_subcategory: Category, test_moderator: User
    ):
        headers = auth_headers(test_moderator)
        listing_id = test_listing.id
        await ListingFactory.create_listing(
            db_session, test_user, test_subcategory, title="In asteptare", status=ListingStatus.PENDING, validated=False
        )

        pending = await async_client.get("/api/admin/listings", params={"status": "PENDING"}, headers=headers)
        assert pending.json()["total"] == 1
        assert pending.json()["total_pages"] == 1
        assert pending.json()["listings"][0]["title"] == "In asteptare"

        updated = await async_client.put(
            f"/api/admin/listings/{listing_id}", json={"status": "INACTIVE"}, headers=headers
        )
        assert updated.json()["status"] == "INACTIVE"

        not_bool = await async_client.put(
            f"/api/admin/listings/{listing_id}/premium", json={"is_premium": "yes"}, headers=headers
        )
        assert not_bool.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

        premium = await async_client.put(
            f"/api/admin/listings/{listing_id}/premium", json={"is_premium": True}, headers=headers
        )
        assert premium.json()["is_premium"] is True

        deleted = await async_client.delete(f"/api/admin/listings/{listing_id}", headers=headers)
        assert deleted.status_code == status.HTTP_200_OK
        again = await async_client.delete(f"/api/admin/listings/{listing_id}", headers=headers)
        assert again.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_user_management(self, async_client: AsyncClient, test_admin: User, test_user: User):
        headers = auth_headers(test_admin)
        admin_id, user_id = test_admin.id, test_user.id

        users = await async_client.get("/api/admin/users", params={"filter": "admin"}, headers=headers)
        assert [u["email"] for u in users.json()["users"]] == ["admin@example.com"]

        bad_filter = await async_client.get("/api/admin/users", params={"filter": "everyone"}, headers=headers)
        assert bad_filter.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

        created = await async_client.post("/api/admin/users", json={
            "email": "moderator2@example.com",
            "password": "parola123",
            "first_name": "Mihai",
            "last_name": "Stan",
            "role": "MODERATOR",
        }, headers=headers)
        assert created.status_code == status.HTTP_201_CREATED
        assert created.json()["role"] == "MODERATOR"

        deactivated = await async_client.put(
            f"/api/admin/users/{user_id}", json={"status": "INACTIVE"}, headers=headers
        )
        assert deactivated.json()["status"] == "INACTIVE"

        self_delete = await async_client.delete(f"/api/admin/users/{admin_id}", headers=headers)
        assert self_delete.status_code == status.HTTP_400_BAD_REQUEST

        deleted = await async_client.delete(f"/api/admin/users/{user_id}", headers=headers)
        assert deleted.status_code == status.HTTP_200_OK
        assert (await async_client.get(f"/api/admin/users/{user_id}", headers=headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_reports(self, async_client: AsyncClient, test_listing: Listing, test_admin: User):
        headers = auth_headers(test_admin)

        report = await async_client.get("/api/admin/reports", params={"period": "week"}, headers=headers)
        assert report.status_code == status.HTTP_200_OK
        assert report.json()["new_listings"] == 1
        assert report.json()["category_distribution"][0]["percentage"] == 100.0

        export = await async_client.get("/api/admin/reports/export", params={"period": "week"}, headers=headers)
        assert export.status_code == status.HTTP_200_OK
        assert export.headers["content-type"].startswith("text/csv")
        assert export.headers["content-disposition"] == "attachment; filename=report-week.csv"
        assert "Laptopuri,laptopuri,1,100.0" in export.text

        unknown = await async_client.get("/api/admin/reports", params={"period": "decade"}, headers=headers)
        assert unknown.status_code == status.HTTP_400_BAD_REQUEST


class TestHealthEndpoints:

    @pytest.mark.asyncio
    async def test_root(self, async_client: AsyncClient):
        response = await async_client.get("/")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["api_prefix"] == "/api"

    @pytest.mark.asyncio
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/health")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["database"] == "connected"
