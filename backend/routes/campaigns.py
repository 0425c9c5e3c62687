# backend/routes/campaigns.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.campaign import Campaign, CampaignCategory, CampaignTargetCategory
from models.product import ProductCategory
from schemas.product import ProductCategoryOut
from schemas.campaign import (
    CampaignCreate, CampaignOut, CampaignCategoryCreate, CampaignCategoryOut,
    RealignCategoryRequest, StatusResponse,
)

router = APIRouter(prefix="/campaigns", tags=["Campaigns"])
categories_router = APIRouter(prefix="/campaign-categories", tags=["Campaigns"])

# Map Campaign model to CampaignOut schema, flattening target categories
def _campaign_to_out(campaign: Campaign) -> CampaignOut:
    categories = [t.product_category for t in campaign.targets if t.product_category is not None]
    out = CampaignOut.model_validate(campaign)
    out.product_categories = [ProductCategoryOut.model_validate(c) for c in categories]
    return out

def _get_campaign(db: Session, campaign_id: str) -> Campaign:
    campaign = db.get(Campaign, campaign_id)
    if not campaign:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return campaign

@router.post("", response_model=CampaignOut, status_code=status.HTTP_201_CREATED)
def add_campaign(payload: CampaignCreate, db: Session = Depends(get_db)):
    if not payload.name.strip():
        raise HTTPException(status_code=400, detail="Missing required fields")

    if payload.campaign_category_id and not db.get(CampaignCategory, payload.campaign_category_id):
        raise HTTPException(status_code=404, detail="Campaign category not found")

    target_ids = list(dict.fromkeys(payload.list_product_category_id))
    if target_ids:
        found = db.query(ProductCategory.id).filter(ProductCategory.id.in_(target_ids)).all()
        missing = set(target_ids) - {row[0] for row in found}
        if missing:
            raise HTTPException(status_code=404, detail=f"Product category not found: {', '.join(sorted(missing))}")

    campaign = Campaign(
        name=payload.name.strip(),
        description=payload.description,
        discount_type=payload.discount_type,
        discount_value=payload.discount_value,
        limit=payload.limit,
        every=payload.every,
        campaign_category_id=payload.campaign_category_id,
        is_active=payload.is_active,
    )
    # Campaign and its targets are written in one commit
    campaign.targets = [CampaignTargetCategory(product_category_id=cid) for cid in target_ids]
    db.add(campaign)
    db.commit()
    db.refresh(campaign)
    return _campaign_to_out(campaign)

@router.get("", response_model=List[CampaignOut])
def get_campaigns(db: Session = Depends(get_db)):
    campaigns = (
        db.query(Campaign)
        .options(joinedload(Campaign.targets).joinedload(CampaignTargetCategory.product_category))
        .order_by(Campaign.name.asc())
        .all()
    )
    return [_campaign_to_out(c) for c in campaigns]

# Soft delete: the campaign stays referenced by past checkouts
@router.delete("/{campaign_id}", response_model=StatusResponse)
def delete_campaign(campaign_id: str, db: Session = Depends(get_db)):
    campaign = _get_campaign(db, campaign_id)
    campaign.is_active = False
    db.commit()
    return {"status": "Campaign deleted successfully"}

@router.patch("/{campaign_id}/activate", response_model=StatusResponse)
def activate_campaign(campaign_id: str, db: Session = Depends(get_db)):
    campaign = _get_campaign(db, campaign_id)
    campaign.is_active = True
    db.commit()
    return {"status": "Campaign activated successfully"}


@categories_router.post("", response_model=CampaignCategoryOut, status_code=status.HTTP_201_CREATED)
def add_campaign_category(payload: CampaignCategoryCreate, db: Session = Depends(get_db)):
    if not payload.name.strip():
        raise HTTPException(status_code=400, detail="Name is required")

    category = CampaignCategory(name=payload.name.strip(), description=payload.description, rank=payload.rank)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category

@categories_router.get("", response_model=List[CampaignCategoryOut])
def get_campaign_categories(db: Session = Depends(get_db)):
    return db.query(CampaignCategory).order_by(CampaignCategory.rank.asc(), CampaignCategory.name.asc()).all()

@categories_router.patch("/realign", response_model=StatusResponse)
def realign_campaign_category_ranks(payload: List[RealignCategoryRequest], db: Session = Depends(get_db)):
    if not payload:
        raise HTTPException(status_code=400, detail="Request body cannot be empty")

    for item in payload:
        # Skip empty or unknown ids
        if not item.category_id:
            continue
        category = db.get(CampaignCategory, item.category_id)
        if category is None:
            continue
        category.rank = item.rank

    db.commit()
    return {"status": "Ranks updated successfully"}
