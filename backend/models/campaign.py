# backend/models/campaign.py
from sqlalchemy import Column, Integer, String, Float, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base, generate_id

DISCOUNT_PERCENT = "percent"
DISCOUNT_FIXED = "fixed"
DISCOUNT_SPEND_AND_SAVE = "spendAndSave"

DISCOUNT_TYPES = (DISCOUNT_PERCENT, DISCOUNT_FIXED, DISCOUNT_SPEND_AND_SAVE)


# Grouping of campaigns for display, ordered by rank
class CampaignCategory(Base):
    __tablename__ = "campaign_categories"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    rank = Column(Integer, nullable=False, default=0, index=True)


# Promotional rule applied at checkout
class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)

    # Discount semantics: see services.pricing
    discount_type = Column(String(20), nullable=False)
    discount_value = Column(Float, nullable=False, default=0)
    limit = Column(Float, nullable=False, default=0) # Cap for spendAndSave, 0 = uncapped
    every = Column(Float, nullable=False, default=0) # Spending step for spendAndSave

    campaign_category_id = Column(String(36), ForeignKey("campaign_categories.id"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    targets = relationship("CampaignTargetCategory", cascade="all, delete-orphan")


# Product categories a campaign is advertised for
class CampaignTargetCategory(Base):
    __tablename__ = "campaign_target_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    campaign_id = Column(String(36), ForeignKey("campaigns.id"), index=True, nullable=False)
    product_category_id = Column(String(36), ForeignKey("product_categories.id"), index=True, nullable=False)

    product_category = relationship("ProductCategory")

    __table_args__ = (
        UniqueConstraint("campaign_id", "product_category_id", name="uq_campaign_target"),
    )
