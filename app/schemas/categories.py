from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.utils.validators import require_text


class CategoryBase(BaseModel):
    """Base schema for category data"""
    name: str = Field(..., min_length=1, max_length=100, description="Category name")
    description: Optional[str] = Field(None, max_length=500, description="Category description")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return require_text(v, "Category name")


class CategoryCreate(CategoryBase):
    """Schema for creating a new category"""
    business_id: str = Field(..., description="Business the category belongs to")


class CategoryUpdate(BaseModel):
    """Schema for updating an existing category"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class CategoryResponse(CategoryBase):
    """Schema for category response"""
    id: str = Field(..., description="Category ID")
    business_id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DefaultCategoryResponse(BaseModel):
    """A category from the built-in dry-cleaning catalog"""
    name: str
    description: str
    item_count: int


class DefaultCatalogLoadResponse(BaseModel):
    categories_created: List[str]
    categories_skipped: List[str]
    items_created: int
    items_skipped: int
