# backend/routes/cart.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from models.product import Product
from models.cart import CartItem
from schemas.cart import CartAddItem, CartItemOut, CartOut, CartLineOut
from services.stores import SqlCheckoutStore

router = APIRouter(prefix="/cart", tags=["Cart"])

def _find_line(db: Session, user_id: str, product_id: str):
    return db.query(CartItem).filter(
        CartItem.user_id == user_id, CartItem.product_id == product_id
    ).first()

def _cart_to_out(db: Session, user_id: str) -> CartOut:
    # Same join the checkout prices from
    lines = SqlCheckoutStore(db).load_cart(user_id)
    items_out = [
        CartLineOut(
            product_id=line.product_id,
            name=line.name,
            quantity=line.quantity,
            unit_price=round(line.unit_price, 2),
            line_total=round(line.line_total, 2),
        )
        for line in lines
    ]
    total = sum(line.line_total for line in lines)
    return CartOut(user_id=user_id, items=items_out, total=round(total, 2))

@router.post("", response_model=CartItemOut)
def add_cart_item(payload: CartAddItem, db: Session = Depends(get_db)):
    if not db.get(User, payload.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    product = db.get(Product, payload.product_id)
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")

    item = _find_line(db, payload.user_id, payload.product_id)

    if item:
        # Repeated additions accumulate on the same line
        item.quantity = CartItem.quantity + payload.quantity
    else:
        item = CartItem(
            user_id=payload.user_id,
            product_id=product.id,
            quantity=payload.quantity,
            price_at_add=product.price,
        )
        db.add(item)

    try:
        db.commit()
    except IntegrityError:
        # A concurrent first add created the line; accumulate onto it
        db.rollback()
        item = _find_line(db, payload.user_id, payload.product_id)
        if item is None:
            raise
        item.quantity = CartItem.quantity + payload.quantity
        db.commit()
    db.refresh(item)
    return item

@router.get("/{user_id}", response_model=CartOut)
def get_cart(user_id: str, db: Session = Depends(get_db)):
    return _cart_to_out(db, user_id)

@router.delete("/{user_id}/items/{product_id}", response_model=CartOut)
def delete_cart_item(user_id: str, product_id: str, db: Session = Depends(get_db)):
    item = db.query(CartItem).filter(
        CartItem.user_id == user_id, CartItem.product_id == product_id
    ).first()
    if not item:
        raise HTTPException(status_code=404, detail="Cart item not found")

    db.delete(item)
    db.commit()
    return _cart_to_out(db, user_id)
