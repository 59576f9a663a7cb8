"""
Category and location reference data endpoints.
"""

from fastapi import APIRouter, Depends, Query, Path
from typing import List, Optional
from uuid import UUID

from marketplace.data.locations import ROMANIAN_LOCATIONS, cities_for_county
from marketplace.services.category import CategoryService
from marketplace.services.error_handler import error_responses
from marketplace.schemas.category import (
    CategoryListResponse,
    CategoryTreeResponse,
    CountyResponse
)
from marketplace.utils.dependencies import get_category_service
from marketplace.utils.exceptions import NotFoundError


router = APIRouter(prefix="/categories", tags=["Categories"])
locations_router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get(
    "",
    response_model=CategoryListResponse,
    summary="List categories",
    description="Active categories in display order, optionally filtered by slug, id or top level only"
)
async def list_categories(
    slug: Optional[str] = Query(None, description="Category slug"),
    id: Optional[UUID] = Query(None, description="Category ID"),
    main_only: bool = Query(False, description="Only categories without a parent"),
    category_service: CategoryService = Depends(get_category_service)
) -> CategoryListResponse:
    categories = await category_service.list_categories(slug=slug, category_id=id, main_only=main_only)
    return CategoryListResponse(categories=categories)


@router.get(
    "/tree",
    response_model=CategoryTreeResponse,
    summary="Category tree",
    description="Main categories with their subcategories nested"
)
async def category_tree(
    category_service: CategoryService = Depends(get_category_service)
) -> CategoryTreeResponse:
    return CategoryTreeResponse(categories=await category_service.get_tree())


@locations_router.get(
    "",
    response_model=List[CountyResponse],
    summary="Counties and cities"
)
async def list_locations() -> List[CountyResponse]:
    return [
        CountyResponse(county=county, cities=cities)
        for county, cities in ROMANIAN_LOCATIONS.items()
    ]


@locations_router.get(
    "/{county}/cities",
    response_model=CountyResponse,
    summary="Cities of a county",
    responses=error_responses(404)
)
async def list_cities(county: str = Path(..., max_length=100)) -> CountyResponse:
    if county not in ROMANIAN_LOCATIONS:
        raise NotFoundError("County", county)
    return CountyResponse(county=county, cities=cities_for_county(county))
