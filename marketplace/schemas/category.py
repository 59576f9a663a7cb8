"""
Category and location schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
import uuid


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    icon_name: Optional[str] = None
    parent_id: Optional[uuid.UUID] = None
    order: int = 0
    is_active: bool = True


class CategorySummary(BaseModel):
    """Category reference embedded in listings."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    parent_id: Optional[uuid.UUID] = None


class CategoryTreeNode(CategoryResponse):
    subcategories: List[CategoryResponse] = Field(default_factory=list)


class CategoryListResponse(BaseModel):
    success: bool = True
    categories: List[CategoryResponse]


class CategoryTreeResponse(BaseModel):
    success: bool = True
    categories: List[CategoryTreeNode]


class LocationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    county: str
    city: str


class CountyResponse(BaseModel):
    county: str
    cities: List[str]
