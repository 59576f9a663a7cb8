"""
Request middleware: assigns a request id, rejects oversized bodies and
unsupported content types, and logs every request with its duration.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time
import uuid

from marketplace.services.error_handler import ErrorHandlerService
from marketplace.utils.exceptions import BadRequestError

logger = logging.getLogger(__name__)

ACCEPTED_BODY_TYPES = ("application/json", "multipart/form-data", "application/x-www-form-urlencoded")


class ValidationMiddleware(BaseHTTPMiddleware):
    """
    Outermost application middleware. The request id it stores on
    ``request.state`` is reused by the error handlers and returned in the
    ``X-Request-ID`` header.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_request_size: int = 50 * 1024 * 1024,
        enable_request_logging: bool = True,
        api_prefix: str = "/api"
    ):
        super().__init__(app)
        self.max_request_size = max_request_size
        self.enable_request_logging = enable_request_logging
        self.api_prefix = api_prefix

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()

        try:
            self._validate_request_size(request)
            self._validate_content_type(request)
        except BadRequestError as exc:
            response = ErrorHandlerService.handle_api_exception(exc, request)
            response.headers["X-Request-ID"] = request_id
            return response

        if self.enable_request_logging:
            logger.info(
                f"Request [{request_id}]: {request.method} {request.url.path}",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "client_ip": self._get_client_ip(request)
                }
            )

        try:
            response = await call_next(request)
        except Exception as exc:
            response = ErrorHandlerService.handle_unexpected_error(exc, request)

        if self.enable_request_logging:
            processing_time = time.time() - start_time
            logger.info(
                f"Response [{request_id}]: {response.status_code} - {processing_time:.3f}s",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "processing_time": processing_time
                }
            )

        response.headers["X-Request-ID"] = request_id
        return response

    def _validate_request_size(self, request: Request) -> None:
        """
        Raises:
            BadRequestError: Content-Length above the limit or not a number
        """
        content_length = request.headers.get("content-length")
        if not content_length:
            return

        try:
            size = int(content_length)
        except ValueError:
            raise BadRequestError("Invalid content-length header")

        if size > self.max_request_size:
            raise BadRequestError(
                f"Request size {size} bytes exceeds maximum allowed size {self.max_request_size} bytes"
            )

    def _validate_content_type(self, request: Request) -> None:
        """Bodies sent to the API must be JSON, multipart or form encoded."""
        if request.method not in ("POST", "PUT", "PATCH"):
            return
        if not request.url.path.startswith(self.api_prefix):
            return

        content_type = request.headers.get("content-type", "")
        if content_type and not content_type.startswith(ACCEPTED_BODY_TYPES):
            raise BadRequestError(
                f"Unsupported content type '{content_type}'. Expected 'application/json'"
            )

    def _get_client_ip(self, request: Request) -> str:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        return request.client.host if request.client else "unknown"
