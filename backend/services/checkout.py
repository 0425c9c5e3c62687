# backend/services/checkout.py
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from services import pricing
from services.errors import InvalidInput, NotFound, EmptyCart
from services.ledger import PointLedger
from services.stores import CheckoutStore

logger = logging.getLogger(__name__)


@dataclass
class CheckoutResult:
    total_price: float
    subtotal: float
    discount: float
    points_used: int
    history_id: str
    message: str = "Checkout successful"


def _unique(ids: Sequence[str]) -> List[str]:
    seen, out = set(), []
    for i in ids:
        if i and i not in seen:
            seen.add(i)
            out.append(i)
    return out


class CheckoutService:
    """Turns a user's cart into a priced, recorded transaction.

    Load -> ValidatePoints -> Compute -> Commit -> Respond. Every write of the
    Commit step runs inside one ``store.unit_of_work()``: either the points
    are debited, the history is recorded and the cart is cleared, or nothing
    changes.
    """

    def __init__(self, store: CheckoutStore):
        self.store = store
        self.ledger = PointLedger(store)

    def checkout(self, user_id: str, campaign_ids: Optional[Sequence[str]] = None,
                 points_used: int = 0) -> CheckoutResult:
        if not user_id or not user_id.strip():
            raise InvalidInput("user_id is required")
        points_used = points_used or 0
        if points_used < 0:
            raise InvalidInput("point_used must not be negative")

        # 1. Load
        lines = self.store.load_cart(user_id)
        if not lines:
            logger.info("Checkout rejected for user %s: cart is empty", user_id)
            raise EmptyCart()

        # 2. ValidatePoints
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFound("User not found")
        self.ledger.validate(user, points_used)

        # 3. Compute
        subtotal = sum(line.line_total for line in lines)
        campaigns = self.store.find_active_campaigns(_unique(campaign_ids or []))
        discount = pricing.total_discount(subtotal, campaigns)
        total = pricing.final_total(subtotal, discount, points_used)

        # 4. Commit
        with self.store.unit_of_work():
            self.ledger.debit(user_id, points_used)
            history = self.store.record_history(
                user_id,
                points_used,
                [line.product_id for line in lines],
                [c.id for c in campaigns],
            )
            history_id = history.id
            if self.store.clear_cart(user_id) == 0:
                # A concurrent checkout already consumed this cart
                raise EmptyCart()

        logger.info(
            "Checkout completed for user %s: subtotal=%.2f discount=%.2f points=%s total=%.2f history=%s",
            user_id, subtotal, discount, points_used, total, history_id,
        )

        # 5. Respond
        return CheckoutResult(
            total_price=round(total, 2),
            subtotal=round(subtotal, 2),
            discount=round(discount, 2),
            points_used=points_used,
            history_id=history_id,
        )
