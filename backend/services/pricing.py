# backend/services/pricing.py
"""Campaign Discount Evaluator.

Pure functions only: no session, no I/O. A campaign is any object exposing
``discount_type``, ``discount_value``, ``every`` and ``limit``.

Supported kinds:

* ``percent``      - ``subtotal * discount_value / 100``
* ``fixed``        - ``discount_value``
* ``spendAndSave`` - ``floor(subtotal / every) * discount_value``, capped at
  ``limit`` when ``limit > 0``

Campaigns stack additively; there is no exclusivity or ordering between them.
"""
import math
from typing import Iterable

from models.campaign import DISCOUNT_PERCENT, DISCOUNT_FIXED, DISCOUNT_SPEND_AND_SAVE


def _spend_and_save(subtotal: float, value: float, every: float, limit: float) -> float:
    if every <= 0 or value <= 0:
        return 0.0
    times = math.floor(subtotal / every)
    discount = times * value
    if limit > 0 and discount > limit:
        discount = limit
    return float(discount)


def campaign_discount(subtotal: float, campaign) -> float:
    """Discount granted by a single campaign for the given subtotal."""
    kind = campaign.discount_type
    value = campaign.discount_value or 0.0

    if kind == DISCOUNT_PERCENT:
        return subtotal * (value / 100)
    if kind == DISCOUNT_FIXED:
        return float(value)
    if kind == DISCOUNT_SPEND_AND_SAVE:
        return _spend_and_save(subtotal, value, campaign.every or 0.0, campaign.limit or 0.0)
    # Unknown kinds grant nothing
    return 0.0


def total_discount(subtotal: float, campaigns: Iterable) -> float:
    return sum((campaign_discount(subtotal, c) for c in campaigns), 0.0)


def final_total(subtotal: float, discount: float, points_used: int = 0) -> float:
    # 1 point = 1 currency unit; the total never drops below zero
    return max(0.0, subtotal - discount - points_used)
