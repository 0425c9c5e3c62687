# backend/models/users.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, CheckConstraint, func
from database import Base, generate_id

# Represents a registered or guest account together with its loyalty point balance
class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String, unique=True, nullable=True, index=True) # Guests have no email
    password_hash = Column(String, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)

    # Loyalty points, redeemable 1:1 at checkout
    point = Column(Integer, CheckConstraint("point >= 0", name="ck_users_point_non_negative"), nullable=False, default=0)
    is_guest = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_login = Column(DateTime(timezone=True), nullable=True)
