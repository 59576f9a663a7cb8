"""
Schemas for currency conversion and file uploads.
"""

from pydantic import BaseModel
from typing import Dict, List, Optional
from marketplace.models.listing import Currency


class ConversionResponse(BaseModel):
    amount: float
    from_currency: Currency
    to_currency: Currency
    converted: float
    formatted: str


class RatesResponse(BaseModel):
    base_currencies: List[Currency]
    rates: Dict[str, Dict[str, float]]
    symbols: Dict[str, str]


class UploadResult(BaseModel):
    filename: str
    success: bool
    url: Optional[str] = None
    error: Optional[str] = None


class UploadResponse(BaseModel):
    success: bool
    urls: List[str]
    results: List[UploadResult]
