"""
FastAPI application entry point.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
import logging

from marketplace.config import settings
from marketplace.database import test_database_connection, close_db_connection
from marketplace.routers import (
    auth_router,
    listings_router,
    search_router,
    categories_router,
    locations_router,
    messages_router,
    notifications_router,
    favorites_router,
    users_router,
    misc_router,
    admin_router
)
from marketplace.utils.exceptions import APIException
from marketplace.services.error_handler import ErrorHandlerService
from marketplace.middleware import ValidationMiddleware

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    if not await test_database_connection():
        logger.error("Failed to connect to database on startup")

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Classifieds marketplace API.

    ## Features

    * **Listings**: signed-in users publish immediately; anonymous submitters confirm by email
    * **Search**: text, category, price, location and premium filters
    * **Currency**: display prices in RON, EUR, USD or GBP
    * **Messaging**: private messages, notifications and favorites
    * **Back-office**: moderation, user management and activity reports

    ## Authentication

    Use `/api/auth/login` to obtain a JWT and send it as `Authorization: Bearer <token>`.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Registration, login and tokens"},
        {"name": "Listings", "description": "Listing submission, validation and management"},
        {"name": "Search", "description": "Listing search"},
        {"name": "Categories", "description": "Category reference data"},
        {"name": "Locations", "description": "Counties and cities"},
        {"name": "Messages", "description": "Private messages"},
        {"name": "Notifications", "description": "User notifications"},
        {"name": "Favorites", "description": "Saved listings"},
        {"name": "Users", "description": "Profiles"},
        {"name": "Utilities", "description": "Currency, uploads and placeholders"},
        {"name": "Admin", "description": "Back-office"},
        {"name": "Health", "description": "Service health"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# Uploads may carry several images per request
app.add_middleware(
    ValidationMiddleware,
    max_request_size=settings.max_file_size * 10,
    enable_request_logging=settings.debug,
    api_prefix=settings.api_prefix
)

for router in (
    auth_router,
    listings_router,
    search_router,
    categories_router,
    locations_router,
    messages_router,
    notifications_router,
    favorites_router,
    users_router,
    misc_router,
    admin_router,
):
    app.include_router(router, prefix=settings.api_prefix)

app.mount(
    settings.uploads_url_prefix,
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads"
)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    """Basic API information."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_prefix
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check with a database round trip."""
    if not await test_database_connection():
        raise HTTPException(status_code=503, detail="Database connection failed")

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "marketplace.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
