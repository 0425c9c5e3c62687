# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Schema for creating a product category
class ProductCategoryCreate(BaseModel):
    name: str = Field(min_length=1)


class ProductCategoryOut(ORMBase):
    id: str
    name: str


# Schema for creating a new product
class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    product_category_id: str = Field(min_length=1)
    price: float = Field(gt=0, description="Unit price > 0")


class ProductOut(ORMBase):
    id: str
    name: str
    description: Optional[str] = None
    product_category_id: str
    price: float
    is_active: bool
    created_at: Optional[datetime] = None


class ProductListPage(BaseModel):
    items: List[ProductOut]
    total: int
    page: int
    page_size: int
