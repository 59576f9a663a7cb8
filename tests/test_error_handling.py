"""
Tests for error handling: the error envelope, exception classes, the
validation middleware and error responses returned by real endpoints.
"""

import pytest
import json
from fastapi import FastAPI, status
from fastapi.testclient import TestClient
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError, OperationalError
from unittest.mock import Mock

from marketplace.models import Listing, User
from marketplace.middleware import ValidationMiddleware
from marketplace.services.error_handler import ErrorHandlerService, error_responses
from marketplace.utils.exceptions import (
    APIException,
    BadRequestError,
    BusinessRuleViolationError,
    ConflictError,
    DuplicateResourceError,
    FileSizeExceededError,
    ForbiddenError,
    InvalidValidationTokenError,
    ListingNotFoundError,
    NotFoundError,
    UnauthorizedError,
    UnsupportedFileTypeError,
    ValidationError
)
from tests.conftest import auth_headers


class TestErrorHandlerService:
    """Envelope formatting for each kind of failure."""

    def test_format_error_response(self):
        response = ErrorHandlerService.format_error_response(
            error_code="TEST_ERROR",
            message="Test error message",
            details=[{"field": "test", "message": "Test field error"}],
            request_id="test123"
        )

        assert response["error"]["code"] == "TEST_ERROR"
        assert response["error"]["message"] == "Test error message"
        assert response["error"]["request_id"] == "test123"
        assert response["error"]["details"][0]["field"] == "test"
        assert response["error"]["timestamp"].endswith("Z")

    def test_details_omitted_when_empty(self):
        response = ErrorHandlerService.format_error_response("X", "message")
        assert "details" not in response["error"]

    def test_handle_api_exception(self):
        response = ErrorHandlerService.handle_api_exception(NotFoundError("Listing", "abc"))

        assert response.status_code == 404
        data = json.loads(response.body)
        assert data["error"]["code"] == "NOT_FOUND"
        assert data["error"]["message"] == "Listing not found with ID: abc"
        assert data["error"]["request_id"]

    def test_validation_exception_keeps_field_errors(self):
        exception = ValidationError("Bad fields", field_errors=[{"field": "price", "message": "negative"}])
        data = json.loads(ErrorHandlerService.handle_api_exception(exception).body)

        assert data["error"]["code"] == "VALIDATION_ERROR"
        assert data["error"]["details"] == [{"field": "price", "message": "negative"}]

    def test_handle_validation_error(self):
        mock_error = Mock()
        mock_error.errors.return_value = [
            {"loc": ("body", "title"), "msg": "Field required", "type": "missing", "input": None},
            {"loc": ("query", "limit"), "msg": "Input should be less than 100", "type": "less_than", "input": b"500"},
        ]

        response = ErrorHandlerService.handle_validation_error(mock_error)

        assert response.status_code == 422
        details = json.loads(response.body)["error"]["details"]
        assert [d["field"] for d in details] == ["body -> title", "query -> limit"]
        assert details[1]["input"] == "500"

    def test_handle_database_errors(self):
        integrity = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: users.email"))
        response = ErrorHandlerService.handle_database_error(integrity)

        assert response.status_code == 409
        data = json.loads(response.body)
        assert data["error"]["code"] == "INTEGRITY_ERROR"
        assert data["error"]["message"] == "Constraint violation: Duplicate value for unique field"

        operational = OperationalError("SELECT 1", {}, Exception("database is locked"))
        response = ErrorHandlerService.handle_database_error(operational)
        assert response.status_code == 500
        assert json.loads(response.body)["error"]["code"] == "DATABASE_ERROR"

    def test_handle_unexpected_error_hides_details(self):
        response = ErrorHandlerService.handle_unexpected_error(RuntimeError("secret internals"))

        assert response.status_code == 500
        data = json.loads(response.body)
        assert data["error"]["code"] == "INTERNAL_SERVER_ERROR"
        assert "secret internals" not in response.body.decode()

    def test_error_responses_subset(self):
        docs = error_responses(400, 404)
        assert set(docs) == {400, 404}
        assert docs[404]["description"] == "Not Found"


class TestExceptions:

    @pytest.mark.parametrize("exception, status_code, code", [
        (BadRequestError("x"), 400, "BAD_REQUEST"),
        (UnauthorizedError(), 401, "UNAUTHORIZED"),
        (ForbiddenError(), 403, "FORBIDDEN"),
        (ListingNotFoundError("slug"), 404, "NOT_FOUND"),
        (DuplicateResourceError("User", "a@b.ro"), 409, "CONFLICT"),
        (InvalidValidationTokenError(), 400, "BAD_REQUEST"),
        (UnsupportedFileTypeError("text/plain"), 400, "BAD_REQUEST"),
        (FileSizeExceededError(10, 5), 400, "BAD_REQUEST"),
    ])
    def test_status_and_code(self, exception, status_code, code):
        assert isinstance(exception, APIException)
        assert exception.status_code == status_code
        assert exception.error_code == code

    def test_messages(self):
        assert BusinessRuleViolationError("status transition", "never validated").detail == (
            "Business rule violation: status transition - never validated"
        )
        assert isinstance(DuplicateResourceError("User", "x"), ConflictError)
        assert "text/plain" in UnsupportedFileTypeError("text/plain").detail


class TestValidationMiddleware:
    """Middleware checks on a minimal app."""

    @pytest.fixture
    def client(self):
        test_app = FastAPI()
        test_app.add_middleware(
            ValidationMiddleware, max_request_size=100, enable_request_logging=False, api_prefix="/api"
        )

        @test_app.post("/api/echo")
        async def echo(data: dict):
            return data

        @test_app.post("/outside")
        async def outside():
            return {"ok": True}

        return TestClient(test_app)

    def test_request_id_header(self, client):
        response = client.post("/api/echo", json={"a": 1})

        assert response.status_code == 200
        assert len(response.headers["X-Request-ID"]) == 8

    def test_request_too_large(self, client):
        response = client.post("/api/echo", json={"text": "x" * 200})

        assert response.status_code == 400
        assert "exceeds maximum allowed size" in response.json()["error"]["message"]
        assert response.json()["error"]["request_id"] == response.headers["X-Request-ID"]

    def test_unsupported_content_type(self, client):
        response = client.post("/api/echo", content=b"a=1", headers={"Content-Type": "text/plain"})

        assert response.status_code == 400
        assert "Unsupported content type" in response.json()["error"]["message"]

    def test_content_type_checked_only_under_api_prefix(self, client):
        response = client.post("/outside", content=b"hello", headers={"Content-Type": "text/plain"})
        assert response.status_code == 200

    def test_client_ip(self):
        middleware = ValidationMiddleware(app=Mock())
        request = Mock()
        request.headers = {"x-forwarded-for": "10.0.0.1, 10.0.0.2"}
        assert middleware._get_client_ip(request) == "10.0.0.1"


class TestAPIErrorResponses:
    """Envelope returned by the real application."""

    @pytest.mark.asyncio
    async def test_validation_error_envelope(self, async_client: AsyncClient, test_user: User):
        response = await async_client.post(
            "/api/listings", json={"title": "", "price": -100}, headers=auth_headers(test_user)
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Request validation failed"
        assert error["request_id"] == response.headers["X-Request-ID"]
        assert "timestamp" in error
        assert {"body -> title", "body -> price", "body -> category_id"} <= {d["field"] for d in error["details"]}

    @pytest.mark.asyncio
    async def test_authentication_error(self, async_client: AsyncClient):
        response = await async_client.get("/api/messages/inbox")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["code"] == "UNAUTHORIZED"
        assert "token" in response.json()["error"]["message"].lower()

    @pytest.mark.asyncio
    async def test_forbidden_error(self, async_client: AsyncClient, test_user: User):
        response = await async_client.get("/api/admin/users", headers=auth_headers(test_user))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"]["code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_not_found_error(self, async_client: AsyncClient):
        response = await async_client.get("/api/listings/anunt-inexistent")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_unknown_route_and_method(self, async_client: AsyncClient, test_listing: Listing):
        response = await async_client.get("/api/does-not-exist")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["code"] == "HTTP_404"

        response = await async_client.post(f"/api/listings/{test_listing.slug}/ownership", json={})
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.json()["error"]["code"] == "HTTP_405"

    @pytest.mark.asyncio
    async def test_unsupported_content_type(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/login", content=b"<login/>", headers={"Content-Type": "application/xml"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "BAD_REQUEST"
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_invalid_uuid_path(self, async_client: AsyncClient):
        response = await async_client.get("/api/users/not-a-uuid")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"]["details"][0]["field"] == "path -> user_id"
