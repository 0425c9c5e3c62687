# backend/routes/products.py
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product, ProductCategory
import schemas.product as product_schemas

router = APIRouter(prefix="/products", tags=["Products"])

@router.post("", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def add_product(payload: product_schemas.ProductCreate, db: Session = Depends(get_db)):
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Incomplete product details")

    if not db.get(ProductCategory, payload.product_category_id):
        raise HTTPException(status_code=404, detail="Product category not found")

    if db.query(Product).filter(Product.name == name).first():
        raise HTTPException(status_code=400, detail="Product name already registered")

    product = Product(
        name=name,
        description=payload.description,
        product_category_id=payload.product_category_id,
        price=payload.price,
        is_active=True,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product

@router.get("", response_model=product_schemas.ProductListPage)
def list_products(
    category_id: Optional[str] = Query(None, description="Filter by product category"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = db.query(Product).filter(Product.is_active == True)  # noqa: E712
    if category_id:
        query = query.filter(Product.product_category_id == category_id)

    query = query.order_by(Product.created_at.desc(), Product.name.asc())
    total = query.count()
    items = query.offset((page - 1) * page_size).limit(page_size).all()

    return {"items": items, "total": total, "page": page, "page_size": page_size}
