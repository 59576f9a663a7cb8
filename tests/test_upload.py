"""
Tests for image uploads, avatar storage and placeholder rendering.
"""

import pytest
import io
from PIL import Image
from fastapi import UploadFile, status
from httpx import AsyncClient
from starlette.datastructures import Headers

from marketplace.models import User
from marketplace.services.upload import (
    UploadService,
    clamp_dimension,
    is_decodable_image,
    render_placeholder
)
from marketplace.utils.exceptions import (
    BadRequestError,
    FileSizeExceededError,
    FileUploadError,
    UnsupportedFileTypeError
)
from marketplace.utils.slug import sanitize_filename
from tests.conftest import auth_headers


def create_test_image(width: int = 80, height: int = 60, format: str = "PNG") -> bytes:
    """Create a test image in memory."""
    img = Image.new("RGB", (width, height), color="red")
    img_bytes = io.BytesIO()
    img.save(img_bytes, format=format)
    return img_bytes.getvalue()


def make_upload(content: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type})
    )


class TestUploadService:

    @pytest.fixture
    def service(self, tmp_path) -> UploadService:
        return UploadService(upload_dir=str(tmp_path), url_prefix="/uploads/", max_file_size=10_000)

    @pytest.mark.asyncio
    async def test_store_image(self, service, tmp_path):
        url = await service.store_image(make_upload(create_test_image(), "my photo (1).png", "image/png"))

        assert url.startswith("/uploads/")
        assert url.endswith("-my_photo__1_.png")

        filename = url.rsplit("/", 1)[-1]
        stored = tmp_path / filename
        assert stored.exists()
        assert Image.open(stored).size == (80, 60)

    @pytest.mark.asyncio
    async def test_rejects_non_image_type(self, service):
        with pytest.raises(UnsupportedFileTypeError):
            await service.read_image(make_upload(b"hello", "notes.txt", "text/plain"))

    @pytest.mark.asyncio
    async def test_rejects_oversized_file(self, service):
        content = create_test_image(400, 400, "BMP")
        with pytest.raises(FileSizeExceededError):
            await service.read_image(make_upload(content, "big.bmp", "image/bmp"))

    @pytest.mark.asyncio
    async def test_rejects_undecodable_and_empty(self, service):
        with pytest.raises(FileUploadError, match="not a valid image"):
            await service.read_image(make_upload(b"not really a png", "fake.png", "image/png"))
        with pytest.raises(FileUploadError, match="empty"):
            await service.read_image(make_upload(b"", "empty.png", "image/png"))

    @pytest.mark.asyncio
    async def test_upload_many_reports_each_file(self, service):
        results = await service.upload_many([
            make_upload(create_test_image(format="JPEG"), "car.jpg", "image/jpeg"),
            make_upload(b"hello", "notes.txt", "text/plain"),
        ])

        assert [r.success for r in results] == [True, False]
        assert results[0].url.endswith("-car.jpg")
        assert "Unsupported file type" in results[1].error

    @pytest.mark.asyncio
    async def test_upload_many_requires_files(self, service):
        with pytest.raises(BadRequestError):
            await service.upload_many([])


class TestHelpers:

    def test_sanitize_filename(self):
        assert sanitize_filename("poză mașină.jpg") == "poz__ma_in_.jpg"
        assert sanitize_filename("../../etc/passwd") == "passwd"
        assert sanitize_filename("C:\\pics\\car.png") == "car.png"
        assert sanitize_filename("") == "image"

    def test_is_decodable_image(self):
        assert is_decodable_image(create_test_image())
        assert not is_decodable_image(b"GIF89a broken")

    def test_placeholder(self):
        content = render_placeholder(120, 90)
        assert Image.open(io.BytesIO(content)).size == (120, 90)

        tiny = render_placeholder(1, 1)
        assert Image.open(io.BytesIO(tiny)).size == (1, 1)

    @pytest.mark.parametrize("value, expected", [(0, 1), (-5, 1), (300, 300), (2000, 2000), (9999, 2000)])
    def test_clamp_dimension(self, value, expected):
        assert clamp_dimension(value) == expected


class TestUploadEndpoints:

    @pytest.mark.asyncio
    async def test_upload_and_serve(self, async_client: AsyncClient):
        png = create_test_image()
        response = await async_client.post("/api/upload", files=[
            ("files", ("front.png", png, "image/png")),
            ("files", ("notes.txt", b"hello", "text/plain")),
        ])

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert len(data["urls"]) == 1
        assert [r["success"] for r in data["results"]] == [True, False]

        served = await async_client.get(data["urls"][0])
        assert served.status_code == status.HTTP_200_OK
        assert served.content == png

    @pytest.mark.asyncio
    async def test_all_files_rejected(self, async_client: AsyncClient):
        response = await async_client.post("/api/upload", files=[
            ("files", ("fake.png", b"not an image", "image/png")),
        ])

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["success"] is False
        assert response.json()["urls"] == []

    @pytest.mark.asyncio
    async def test_no_files(self, async_client: AsyncClient):
        response = await async_client.post("/api/upload")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["message"] == "No files were uploaded"

    @pytest.mark.asyncio
    async def test_avatar(self, async_client: AsyncClient, test_user: User):
        headers = auth_headers(test_user)
        response = await async_client.post(
            "/api/user/avatar", files={"file": ("me.png", create_test_image(), "image/png")}, headers=headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["avatar"].startswith("/uploads/")
        assert response.json()["avatar"].endswith("-me.png")

        rejected = await async_client.post(
            "/api/user/avatar", files={"file": ("me.txt", b"hello", "text/plain")}, headers=headers
        )
        assert rejected.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_avatar_requires_login(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/user/avatar", files={"file": ("me.png", create_test_image(), "image/png")}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
