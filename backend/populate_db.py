"""Seed a small demo catalog: product categories, products, campaigns.

Run from the backend folder: ``python populate_db.py``.
"""
from sqlalchemy.orm import Session

from database import SessionLocal, init_db
from models.product import Product, ProductCategory
from models.campaign import (
    Campaign, CampaignCategory, CampaignTargetCategory,
    DISCOUNT_PERCENT, DISCOUNT_FIXED, DISCOUNT_SPEND_AND_SAVE,
)

# Configuration
CATEGORIES = ["clothing", "electronics", "home"]

PRODUCTS = [
    # (name, category, price)
    ("Basic T-Shirt", "clothing", 20.0),
    ("Denim Jacket", "clothing", 85.0),
    ("Wireless Earbuds", "electronics", 59.0),
    ("USB-C Charger", "electronics", 15.0),
    ("Ceramic Mug", "home", 9.5),
]

CAMPAIGNS = [
    # (name, discount_type, discount_value, every, limit, target categories)
    ("10% off everything", DISCOUNT_PERCENT, 10.0, 0.0, 0.0, []),
    ("50 off", DISCOUNT_FIXED, 50.0, 0.0, 0.0, ["clothing"]),
    ("Spend 300 save 40", DISCOUNT_SPEND_AND_SAVE, 40.0, 300.0, 120.0, ["electronics", "home"]),
]
# End Configuration


def seed(session: Session) -> bool:
    """Insert demo data. Returns False when the catalog is already populated."""
    if session.query(Product).first():
        return False

    categories = {name: ProductCategory(name=name) for name in CATEGORIES}
    session.add_all(categories.values())
    session.flush()

    session.add_all(
        Product(name=name, product_category_id=categories[cat].id, price=price, is_active=True)
        for name, cat, price in PRODUCTS
    )

    promo = CampaignCategory(name="Seasonal", description="Seasonal promotions", rank=1)
    session.add(promo)
    session.flush()

    for name, kind, value, every, limit, targets in CAMPAIGNS:
        campaign = Campaign(
            name=name,
            discount_type=kind,
            discount_value=value,
            every=every,
            limit=limit,
            campaign_category_id=promo.id,
            is_active=True,
        )
        campaign.targets = [CampaignTargetCategory(product_category_id=categories[t].id) for t in targets]
        session.add(campaign)

    session.commit()
    return True


if __name__ == "__main__":
    init_db()
    session = SessionLocal()
    try:
        if seed(session):
            print(f"Seeded {len(CATEGORIES)} categories, {len(PRODUCTS)} products, {len(CAMPAIGNS)} campaigns.")
        else:
            print("Catalog already populated, nothing to do.")
    finally:
        session.close()
