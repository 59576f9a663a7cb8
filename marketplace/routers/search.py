"""
Listing search endpoint.
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from marketplace.services.listing import ListingService, to_listing_response
from marketplace.services.currency import parse_currency
from marketplace.services.error_handler import error_responses
from marketplace.schemas.listing import SearchResponse
from marketplace.utils.dependencies import get_listing_service


router = APIRouter(prefix="/search", tags=["Search"])


@router.get(
    "",
    response_model=SearchResponse,
    summary="Search listings",
    description=(
        "Text, category, price, location and premium filters over active listings. "
        "Prices are validated before the database is queried. Results are capped "
        "and not paginated."
    ),
    responses=error_responses(400)
)
async def search_listings(
    query: Optional[str] = Query(None, max_length=200, description="Matches title or description"),
    category: Optional[str] = Query(None, description="Category slug; 'toate' or empty for all"),
    min_price: Optional[str] = Query(None, description="Minimum price"),
    max_price: Optional[str] = Query(None, description="Maximum price"),
    city: Optional[str] = Query(None, max_length=100),
    county: Optional[str] = Query(None, max_length=100),
    sort_by: Optional[str] = Query(None, description="price_asc, price_desc, popular or recent"),
    min_price_legacy: Optional[str] = Query(None, alias="minPrice", include_in_schema=False),
    max_price_legacy: Optional[str] = Query(None, alias="maxPrice", include_in_schema=False),
    sort_by_legacy: Optional[str] = Query(None, alias="sortBy", include_in_schema=False),
    premium: bool = Query(False, description="Only premium listings"),
    currency: Optional[str] = Query(None, description="Display currency: RON, EUR, USD or GBP"),
    listing_service: ListingService = Depends(get_listing_service)
) -> SearchResponse:
    # minPrice, maxPrice and sortBy are the older camelCase spellings
    filters = listing_service.build_search_filters(
        query=query,
        category=category,
        min_price=min_price if min_price is not None else min_price_legacy,
        max_price=max_price if max_price is not None else max_price_legacy,
        city=city,
        county=county,
        sort_by=sort_by or sort_by_legacy or "recent",
        premium=premium
    )
    display_currency = parse_currency(currency)

    listings = await listing_service.search(filters)
    return SearchResponse(
        success=True,
        total=len(listings),
        listings=[to_listing_response(listing, display_currency) for listing in listings]
    )
