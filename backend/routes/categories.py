# backend/routes/categories.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product, ProductCategory
from schemas.product import ProductCategoryCreate, ProductCategoryOut
from schemas.campaign import StatusResponse

router = APIRouter(prefix="/product-categories", tags=["Product categories"])

def _norm_name(name: str) -> str:
    return name.strip().lower()

@router.post("", response_model=ProductCategoryOut, status_code=status.HTTP_201_CREATED)
def add_product_category(payload: ProductCategoryCreate, db: Session = Depends(get_db)):
    name = _norm_name(payload.name)
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")

    if db.query(ProductCategory).filter(ProductCategory.name == name).first():
        raise HTTPException(status_code=400, detail="Category already exists")

    category = ProductCategory(name=name)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category

@router.get("", response_model=List[ProductCategoryOut])
def get_product_categories(db: Session = Depends(get_db)):
    return db.query(ProductCategory).order_by(ProductCategory.name.asc()).all()

@router.delete("/{category_id}", response_model=StatusResponse)
def delete_product_category(category_id: str, db: Session = Depends(get_db)):
    category = db.get(ProductCategory, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    # Products keep a hard reference to their category
    in_use = db.query(Product.id).filter(Product.product_category_id == category_id).first()
    if in_use:
        raise HTTPException(status_code=400, detail="Category is still used by products")

    db.delete(category)
    db.commit()
    return {"status": "Category deleted successfully"}
