"""
Error response formatting for every failure the API reports.

All handlers return the same envelope::

    {"error": {"code", "message", "timestamp", "request_id", "details"?}}

The request id is the one assigned by ``ValidationMiddleware`` when present,
so log lines and responses can be matched.
"""

from typing import Dict, Any, Optional, List
from datetime import datetime, timezone
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from marketplace.config import settings
from marketplace.utils.exceptions import APIException, ValidationError
import logging
import traceback
import uuid

logger = logging.getLogger(__name__)


class ErrorHandlerService:
    """Builds structured JSON error responses and logs them."""

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Format error response in a consistent structure.

        Args:
            error_code: Error code identifier
            message: Human-readable error message
            details: Optional list of detailed error information
            request_id: Optional request identifier for tracking

        Returns:
            Formatted error response dictionary
        """
        response = {
            "error": {
                "code": error_code,
                "message": message,
                "timestamp": ErrorHandlerService._get_current_timestamp(),
            }
        }

        if details:
            response["error"]["details"] = details

        if request_id:
            response["error"]["request_id"] = request_id

        return response

    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Domain exceptions raised by services and dependencies."""
        request_id = ErrorHandlerService._request_id(request)

        logger.warning(
            f"API Exception [{request_id}]: {exception.error_code} - {exception.detail}",
            extra={
                "error_code": exception.error_code,
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        details = None
        if isinstance(exception, ValidationError) and exception.field_errors:
            details = exception.field_errors

        error_response = ErrorHandlerService.format_error_response(
            error_code=exception.error_code or "API_ERROR",
            message=exception.detail,
            details=details,
            request_id=request_id
        )

        return JSONResponse(
            status_code=exception.status_code,
            content=error_response,
            headers=exception.headers
        )

    @staticmethod
    def handle_validation_error(
        exception: RequestValidationError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Request body, query or path values that failed schema validation."""
        request_id = ErrorHandlerService._request_id(request)

        validation_details = []
        for error in exception.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"])
            validation_details.append({
                "field": field_path,
                "message": error["msg"],
                "type": error["type"],
                "input": error.get("input")
            })

        logger.warning(
            f"Validation Error [{request_id}]: {len(validation_details)} field errors",
            extra={
                "error_count": len(validation_details),
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            details=validation_details,
            request_id=request_id
        )

        # inputs may hold bytes or Decimals
        return JSONResponse(
            status_code=422,
            content=jsonable_encoder(error_response, custom_encoder={bytes: lambda b: b.decode(errors="replace")})
        )

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        request_id = ErrorHandlerService._request_id(request)

        if isinstance(exception, IntegrityError):
            error_code = "INTEGRITY_ERROR"
            message = "Data integrity constraint violation"
            status_code = 409

            constraint_info = ErrorHandlerService._extract_constraint_info(exception)
            if constraint_info:
                message = f"Constraint violation: {constraint_info}"
        else:
            error_code = "DATABASE_ERROR"
            message = "Database operation failed"
            status_code = 500

        logger.error(
            f"Database Error [{request_id}]: {error_code} - {str(exception)}",
            extra={
                "error_code": error_code,
                "request_id": request_id,
                "path": request.url.path if request else None,
                "exception_type": type(exception).__name__
            },
            exc_info=True
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code=error_code,
            message=message,
            request_id=request_id
        )

        return JSONResponse(
            status_code=status_code,
            content=error_response
        )

    @staticmethod
    def handle_http_exception(
        exception: HTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Plain HTTP errors such as unknown routes or wrong methods."""
        request_id = ErrorHandlerService._request_id(request)

        logger.warning(
            f"HTTP Exception [{request_id}]: {exception.status_code} - {exception.detail}",
            extra={
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code=f"HTTP_{exception.status_code}",
            message=str(exception.detail),
            request_id=request_id
        )

        return JSONResponse(
            status_code=exception.status_code,
            content=error_response,
            headers=getattr(exception, "headers", None)
        )

    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Anything not handled elsewhere. The response carries a generic message;
        the traceback is attached only when debug is enabled.
        """
        request_id = ErrorHandlerService._request_id(request)

        logger.error(
            f"Unexpected Error [{request_id}]: {type(exception).__name__} - {str(exception)}",
            extra={
                "request_id": request_id,
                "path": request.url.path if request else None,
                "exception_type": type(exception).__name__
            },
            exc_info=True
        )

        details = None
        if settings.debug:
            details = [{
                "exception": type(exception).__name__,
                "message": str(exception),
                "traceback": traceback.format_exception(type(exception), exception, exception.__traceback__)
            }]

        error_response = ErrorHandlerService.format_error_response(
            error_code="INTERNAL_SERVER_ERROR",
            message="An unexpected error occurred. Please try again later.",
            details=details,
            request_id=request_id
        )

        return JSONResponse(
            status_code=500,
            content=error_response
        )

    @staticmethod
    def _request_id(request: Optional[Request]) -> str:
        if request is not None:
            request_id = getattr(request.state, "request_id", None)
            if request_id:
                return request_id
        return ErrorHandlerService._generate_request_id()

    @staticmethod
    def _generate_request_id() -> str:
        return str(uuid.uuid4())[:8]

    @staticmethod
    def _get_current_timestamp() -> str:
        return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    @staticmethod
    def _extract_constraint_info(exception: IntegrityError) -> Optional[str]:
        error_msg = str(exception.orig).lower()

        if "unique" in error_msg:
            return "Duplicate value for unique field"
        elif "foreign key" in error_msg:
            return "Referenced record does not exist"
        elif "not null" in error_msg:
            return "Required field cannot be empty"
        elif "check constraint" in error_msg:
            return "Value does not meet validation requirements"

        return None


def _example(code: str, message: str) -> Dict[str, Any]:
    return {
        "application/json": {
            "example": {
                "error": {
                    "code": code,
                    "message": message,
                    "timestamp": "2024-01-01T00:00:00Z",
                    "request_id": "abc12345"
                }
            }
        }
    }


# Shared OpenAPI error documentation for routers
ERROR_RESPONSES = {
    400: {"description": "Bad Request", "content": _example("BAD_REQUEST", "Invalid request parameters")},
    401: {"description": "Unauthorized", "content": _example("UNAUTHORIZED", "Authentication required")},
    403: {"description": "Forbidden", "content": _example("FORBIDDEN", "Access forbidden")},
    404: {"description": "Not Found", "content": _example("NOT_FOUND", "Resource not found")},
    409: {"description": "Conflict", "content": _example("CONFLICT", "Resource already exists")},
    422: {"description": "Validation Error", "content": _example("VALIDATION_ERROR", "Request validation failed")},
    500: {"description": "Internal Server Error", "content": _example("INTERNAL_SERVER_ERROR", "An unexpected error occurred")},
}


def error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """Subset of ERROR_RESPONSES for a route's ``responses=`` argument."""
    return {code: ERROR_RESPONSES[code] for code in status_codes}
