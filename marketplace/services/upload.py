"""
Image upload storage and placeholder rendering.

Uploaded files are checked (image content type, size limit, decodable by
Pillow) and written under ``settings.upload_dir`` as ``{unix ms}-{name}``.
The public URL is ``{uploads_url_prefix}/{filename}``.
"""

from pathlib import Path
from typing import List, Optional
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from PIL import Image, ImageDraw
from marketplace.config import settings
from marketplace.schemas.misc import UploadResult
from marketplace.utils.slug import sanitize_filename, timestamp_suffix
from marketplace.utils.exceptions import (
    BadRequestError,
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError
)
import aiofiles
import io
import logging

logger = logging.getLogger(__name__)

PLACEHOLDER_MAX_SIDE = 2000
PLACEHOLDER_BACKGROUND = (229, 231, 235)
PLACEHOLDER_TEXT = (107, 114, 128)


def is_decodable_image(content: bytes) -> bool:
    """True when Pillow recognises and verifies the bytes as an image."""
    try:
        with Image.open(io.BytesIO(content)) as img:
            img.verify()
        return True
    except Exception:
        return False


def clamp_dimension(value: int) -> int:
    return max(1, min(PLACEHOLDER_MAX_SIDE, value))


def render_placeholder(width: int, height: int) -> bytes:
    """Grey PNG of the requested size with its dimensions written in the middle."""
    width = clamp_dimension(width)
    height = clamp_dimension(height)

    image = Image.new("RGB", (width, height), PLACEHOLDER_BACKGROUND)
    label = f"{width}x{height}"
    draw = ImageDraw.Draw(image)
    left, top, right, bottom = draw.textbbox((0, 0), label)
    if right - left < width and bottom - top < height:
        draw.text(
            ((width - (right - left)) / 2, (height - (bottom - top)) / 2),
            label,
            fill=PLACEHOLDER_TEXT,
        )

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class UploadService:
    """Validates and stores uploaded images."""

    def __init__(
        self,
        upload_dir: Optional[str] = None,
        url_prefix: Optional[str] = None,
        max_file_size: Optional[int] = None
    ):
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.url_prefix = (url_prefix or settings.uploads_url_prefix).rstrip("/")
        self.max_file_size = max_file_size or settings.max_file_size

    def build_filename(self, original_filename: Optional[str]) -> str:
        return f"{timestamp_suffix()}-{sanitize_filename(original_filename)}"

    async def read_image(self, file: UploadFile) -> bytes:
        """
        Read and check one upload.

        Raises:
            UnsupportedFileTypeError: Content type is not image/*
            FileSizeExceededError: Larger than the configured limit
            FileUploadError: Empty, or not decodable as an image
        """
        content_type = file.content_type or ""
        if not content_type.startswith("image/"):
            raise UnsupportedFileTypeError(content_type or "unknown")

        content = await file.read()
        if not content:
            raise FileUploadError("File is empty")
        if len(content) > self.max_file_size:
            raise FileSizeExceededError(len(content), self.max_file_size)

        if not await run_in_threadpool(is_decodable_image, content):
            raise FileUploadError(f"'{file.filename}' is not a valid image")

        return content

    async def save(self, content: bytes, original_filename: Optional[str]) -> str:
        """Write bytes to the upload directory and return the public URL."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        filename = self.build_filename(original_filename)

        async with aiofiles.open(self.upload_dir / filename, "wb") as f:
            await f.write(content)

        logger.info(f"Stored upload {filename} ({len(content)} bytes)")
        return f"{self.url_prefix}/{filename}"

    async def store_image(self, file: UploadFile) -> str:
        content = await self.read_image(file)
        return await self.save(content, file.filename)

    async def upload_many(self, files: List[UploadFile]) -> List[UploadResult]:
        """
        Store several files. A rejected file is reported in its result and
        does not stop the others.

        Raises:
            BadRequestError: No files were sent
        """
        if not files:
            raise BadRequestError("No files were uploaded")

        results = []
        for file in files:
            name = file.filename or "unnamed"
            try:
                url = await self.store_image(file)
                results.append(UploadResult(filename=name, success=True, url=url))
            except FileUploadError as e:
                logger.warning(f"Upload of {name} rejected: {e.detail}")
                results.append(UploadResult(filename=name, success=False, error=e.detail))

        return results


def get_upload_service() -> UploadService:
    return UploadService()
