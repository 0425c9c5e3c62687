# backend/services/ledger.py
import logging

from services.errors import InvalidInput, InsufficientPoints
from services.stores import CheckoutStore

logger = logging.getLogger(__name__)


class PointLedger:
    """Loyalty point validation and debit against a user's balance."""

    def __init__(self, store: CheckoutStore):
        self.store = store

    def validate(self, user, requested_points: int) -> None:
        if requested_points < 0:
            raise InvalidInput("point_used must not be negative")
        if requested_points > (user.point or 0):
            raise InsufficientPoints()

    def debit(self, user_id: str, amount: int) -> None:
        # Call once per checkout attempt, after validate()
        if amount <= 0:
            return
        if not self.store.debit_points(user_id, amount):
            # Balance changed between validate() and the guarded decrement
            logger.info("Point debit rejected for user %s (amount=%s)", user_id, amount)
            raise InsufficientPoints()
