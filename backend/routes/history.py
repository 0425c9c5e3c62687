# backend/routes/history.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload

from database import get_db
from models.users import User
from models.history import TransactionHistory
from schemas.history import HistoryPage, TransactionHistoryOut

router = APIRouter(prefix="/history", tags=["History"])

def _history_to_out(history: TransactionHistory) -> TransactionHistoryOut:
    return TransactionHistoryOut(
        id=history.id,
        user_id=history.user_id,
        point_used=history.point_used,
        date=history.date,
        product_ids=[p.product_id for p in history.products],
        campaign_ids=[c.campaign_id for c in history.campaigns],
    )

# Read-only listing of a user's completed checkouts, newest first
@router.get("/{user_id}", response_model=HistoryPage)
def list_history(
    user_id: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    if not db.get(User, user_id):
        raise HTTPException(status_code=404, detail="User not found")

    query = db.query(TransactionHistory).filter(TransactionHistory.user_id == user_id)
    total = query.count()
    items = (
        query.options(selectinload(TransactionHistory.products), selectinload(TransactionHistory.campaigns))
        .order_by(TransactionHistory.date.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return {"items": [_history_to_out(h) for h in items], "total": total, "page": page, "page_size": page_size}
