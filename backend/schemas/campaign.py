# backend/schemas/campaign.py
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, ConfigDict

from schemas.product import ProductCategoryOut


class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Payload for creating a campaign
class CampaignCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    discount_type: Literal["percent", "fixed", "spendAndSave"]
    discount_value: float = Field(0, ge=0)
    limit: float = Field(0, ge=0, description="Cap for spendAndSave, 0 = no cap")
    every: float = Field(0, ge=0, description="Spending step for spendAndSave")
    campaign_category_id: Optional[str] = None
    is_active: bool = True
    list_product_category_id: List[str] = Field(default_factory=list)


class CampaignOut(ORMBase):
    id: str
    name: str
    description: Optional[str] = None
    discount_type: str
    discount_value: float
    limit: float
    every: float
    campaign_category_id: Optional[str] = None
    is_active: bool
    product_categories: List[ProductCategoryOut] = Field(default_factory=list)


class CampaignCategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    rank: int = 0


class CampaignCategoryOut(ORMBase):
    id: str
    name: str
    description: Optional[str] = None
    rank: int


# One entry of a rank realignment request
class RealignCategoryRequest(BaseModel):
    category_id: str = ""
    rank: int


class StatusResponse(BaseModel):
    status: str
