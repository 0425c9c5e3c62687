# backend/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, String, Float, DateTime, UniqueConstraint, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base, generate_id

# A single (user, product) pairing in the user's cart
class CartItem(Base):
    __tablename__ = "cart_items" # Table name

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False) # Owner of the cart
    product_id = Column(String(36), ForeignKey("products.id"), index=True, nullable=False)
    quantity = Column(Integer, CheckConstraint("quantity > 0", name="ck_cart_items_quantity_positive"), nullable=False, default=1)
    price_at_add = Column(Float, nullable=True) # Unit price when the line was first created
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship("Product") # Relationship to Product

    __table_args__ = (
        # Repeated additions accumulate quantity on one row
        UniqueConstraint("user_id", "product_id", name="uq_cartitem_user_product"),
    )
