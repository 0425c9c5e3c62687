# backend/models/history.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base, generate_id

# Write-once record of a completed checkout
class TransactionHistory(Base):
    __tablename__ = "transaction_histories"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    point_used = Column(Integer, nullable=False, default=0)
    date = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    products = relationship("TransactionHistoryProduct", cascade="all, delete-orphan")
    campaigns = relationship("TransactionHistoryCampaign", cascade="all, delete-orphan")


class TransactionHistoryProduct(Base):
    __tablename__ = "transaction_history_products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    history_id = Column(String(36), ForeignKey("transaction_histories.id"), index=True, nullable=False)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)


class TransactionHistoryCampaign(Base):
    __tablename__ = "transaction_history_campaigns"

    id = Column(Integer, primary_key=True, autoincrement=True)
    history_id = Column(String(36), ForeignKey("transaction_histories.id"), index=True, nullable=False)
    campaign_id = Column(String(36), ForeignKey("campaigns.id"), nullable=False)
