# backend/routes/checkout.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from schemas.checkout import CheckoutRequest, CheckoutResponse
from services.checkout import CheckoutService
from services.errors import ShopError
from services.stores import SqlCheckoutStore
from utils.audit import write_log

router = APIRouter(prefix="/checkout", tags=["Checkout"])

# Checkout core bound to the request session
def get_checkout_service(db: Session = Depends(get_db)) -> CheckoutService:
    return CheckoutService(SqlCheckoutStore(db))

@router.post("", response_model=CheckoutResponse)
def checkout(
    payload: CheckoutRequest,
    request: Request,
    db: Session = Depends(get_db),
    service: CheckoutService = Depends(get_checkout_service),
):
    ip = request.client.host if request.client else None
    try:
        result = service.checkout(payload.user_id, payload.campaign_ids, payload.point_used)
    except ShopError as e:
        write_log(db, user_id=None, action="CHECKOUT", resource="checkout", status="FAIL", ip=ip,
                  meta={"user_id": payload.user_id, "reason": e.message})
        raise

    write_log(
        db,
        user_id=payload.user_id,
        action="CHECKOUT",
        resource="checkout",
        status="SUCCESS",
        ip=ip,
        meta={"history_id": result.history_id, "total": result.total_price, "point_used": result.points_used},
    )
    return CheckoutResponse(
        total_price=result.total_price,
        message=result.message,
        subtotal=result.subtotal,
        discount=result.discount,
        point_used=result.points_used,
        history_id=result.history_id,
    )
