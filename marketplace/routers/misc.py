"""
Currency conversion, image upload and placeholder images.
"""

from fastapi import APIRouter, Depends, Query, Path, UploadFile, File
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from typing import List, Optional

from marketplace.services.currency import (
    SUPPORTED_CURRENCIES,
    CURRENCY_SYMBOLS,
    parse_currency,
    convert_price,
    format_price,
    rates_table
)
from marketplace.services.upload import UploadService, get_upload_service, clamp_dimension, render_placeholder
from marketplace.services.error_handler import error_responses
from marketplace.schemas.listing import MAX_PRICE
from marketplace.schemas.misc import ConversionResponse, RatesResponse, UploadResponse


router = APIRouter(tags=["Utilities"])


@router.get(
    "/currency/rates",
    response_model=RatesResponse,
    summary="Exchange rates"
)
async def get_rates() -> RatesResponse:
    return RatesResponse(
        base_currencies=SUPPORTED_CURRENCIES,
        rates=rates_table(),
        symbols={currency.value: symbol for currency, symbol in CURRENCY_SYMBOLS.items()}
    )


@router.get(
    "/currency/convert",
    response_model=ConversionResponse,
    summary="Convert an amount",
    responses=error_responses(400, 422)
)
async def convert(
    amount: float = Query(..., ge=0, le=float(MAX_PRICE), allow_inf_nan=False),
    from_currency: str = Query(..., description="RON, EUR, USD or GBP"),
    to_currency: str = Query(..., description="RON, EUR, USD or GBP")
) -> ConversionResponse:
    source = parse_currency(from_currency)
    target = parse_currency(to_currency)
    converted = convert_price(amount, source, target)

    return ConversionResponse(
        amount=amount,
        from_currency=source,
        to_currency=target,
        converted=float(converted),
        formatted=format_price(converted, target)
    )


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload images",
    description=(
        "Store one or more images. Each file is checked on its own; rejected files "
        "are reported in `results` and do not stop the rest."
    ),
    responses=error_responses(400)
)
async def upload_images(
    files: Optional[List[UploadFile]] = File(None, description="Image files"),
    upload_service: UploadService = Depends(get_upload_service)
) -> UploadResponse:
    results = await upload_service.upload_many(files or [])
    urls = [result.url for result in results if result.success]

    return UploadResponse(success=bool(urls), urls=urls, results=results)


@router.get(
    "/placeholder/{width}/{height}",
    response_class=Response,
    summary="Placeholder image",
    description="Grey PNG with its size written in the middle. Dimensions are clamped to 1..2000.",
    responses={200: {"content": {"image/png": {}}}}
)
async def placeholder(
    width: int = Path(...),
    height: int = Path(...)
) -> Response:
    content = await run_in_threadpool(render_placeholder, clamp_dimension(width), clamp_dimension(height))
    return Response(
        content=content,
        media_type="image/png",
        headers={"Cache-Control": "public, max-age=86400"}
    )
