# backend/models/product.py
from sqlalchemy import Column, String, Float, Boolean, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base, generate_id

# Catalog grouping used by products and campaign targeting
class ProductCategory(Base):
    __tablename__ = "product_categories"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, unique=True, nullable=False, index=True) # Stored trimmed and lower-cased


# Model Product
# A sellable catalog entry. Its current price is what checkout charges.
class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(String, nullable=True)
    product_category_id = Column(String(36), ForeignKey("product_categories.id"), index=True, nullable=False)

    price = Column(Float, CheckConstraint("price > 0", name="ck_products_price_positive"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    category = relationship("ProductCategory")
