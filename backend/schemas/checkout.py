# backend/schemas/checkout.py
from typing import List
from pydantic import BaseModel, Field


class CheckoutRequest(BaseModel):
    user_id: str = Field(min_length=1)
    campaign_ids: List[str] = Field(default_factory=list)
    point_used: int = Field(0, ge=0)


class CheckoutResponse(BaseModel):
    total_price: float
    message: str
    subtotal: float
    discount: float
    point_used: int
    history_id: str
