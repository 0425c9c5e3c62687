# backend/schemas/history.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class TransactionHistoryOut(BaseModel):
    id: str
    user_id: str
    point_used: int
    date: Optional[datetime] = None
    product_ids: List[str]
    campaign_ids: List[str]


class HistoryPage(BaseModel):
    items: List[TransactionHistoryOut]
    total: int
    page: int
    page_size: int
