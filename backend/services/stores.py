# backend/services/stores.py
import abc
import functools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.users import User
from models.product import Product
from models.cart import CartItem
from models.campaign import Campaign
from models.history import TransactionHistory, TransactionHistoryProduct, TransactionHistoryCampaign
from services.errors import StorageFailure

logger = logging.getLogger(__name__)


# Cart line joined with the product's current name and price
@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    unit_price: float
    quantity: int

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


class CheckoutStore(abc.ABC):
    """Storage collaborators used by the checkout core.

    Reads return plain values or ``None`` for absent records. Writes issued
    inside ``unit_of_work()`` become visible together or not at all.
    """

    @abc.abstractmethod
    def load_cart(self, user_id: str) -> List[CartLine]:
        """Cart lines of ``user_id`` joined with current product data."""

    @abc.abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        """The user, or ``None`` when absent."""

    @abc.abstractmethod
    def find_active_campaigns(self, campaign_ids: Sequence[str]) -> List[Campaign]:
        """Active campaigns among ``campaign_ids``; unknown ids are ignored."""

    @abc.abstractmethod
    def debit_points(self, user_id: str, amount: int) -> bool:
        """Decrement the balance by ``amount`` only if it covers it.

        Returns ``False`` when the guard rejected the decrement.
        """

    @abc.abstractmethod
    def record_history(self, user_id: str, points_used: int,
                       product_ids: Sequence[str], campaign_ids: Sequence[str]) -> TransactionHistory:
        """Append a history record with its product and campaign links."""

    @abc.abstractmethod
    def clear_cart(self, user_id: str) -> int:
        """Delete every cart line of the user and return how many were removed."""

    @abc.abstractmethod
    def unit_of_work(self):
        """Context manager committing all writes on success, rolling back on error."""


def _storage_call(fn):
    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.error("Storage call %s failed: %s", fn.__name__, e)
            self.db.rollback()
            raise StorageFailure(f"Storage operation '{fn.__name__}' failed") from e
    return wrapper


class SqlCheckoutStore(CheckoutStore):
    """SQLAlchemy-backed store bound to a single request session."""

    def __init__(self, db: Session):
        self.db = db

    @_storage_call
    def load_cart(self, user_id: str) -> List[CartLine]:
        rows = (
            self.db.query(CartItem.product_id, CartItem.quantity, Product.name, Product.price)
            .join(Product, Product.id == CartItem.product_id)
            .filter(CartItem.user_id == user_id)
            .all()
        )
        return [
            CartLine(product_id=r.product_id, name=r.name, unit_price=r.price, quantity=r.quantity)
            for r in rows
        ]

    @_storage_call
    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    @_storage_call
    def find_active_campaigns(self, campaign_ids: Sequence[str]) -> List[Campaign]:
        if not campaign_ids:
            return []
        return (
            self.db.query(Campaign)
            .filter(Campaign.id.in_(list(campaign_ids)), Campaign.is_active == True)  # noqa: E712
            .all()
        )

    @_storage_call
    def debit_points(self, user_id: str, amount: int) -> bool:
        # Single conditional UPDATE: concurrent debits cannot both pass the guard
        changed = (
            self.db.query(User)
            .filter(User.id == user_id, User.point >= amount)
            .update({User.point: User.point - amount}, synchronize_session=False)
        )
        return changed == 1

    @_storage_call
    def record_history(self, user_id: str, points_used: int,
                       product_ids: Sequence[str], campaign_ids: Sequence[str]) -> TransactionHistory:
        history = TransactionHistory(
            user_id=user_id,
            point_used=points_used,
            date=datetime.now(timezone.utc),
        )
        history.products = [TransactionHistoryProduct(product_id=pid) for pid in product_ids]
        history.campaigns = [TransactionHistoryCampaign(campaign_id=cid) for cid in campaign_ids]
        self.db.add(history)
        self.db.flush()
        return history

    @_storage_call
    def clear_cart(self, user_id: str) -> int:
        return (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id)
            .delete(synchronize_session=False)
        )

    @contextmanager
    def unit_of_work(self):
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Commit failed, rolled back: %s", e)
            raise StorageFailure("Failed to commit checkout") from e
        except Exception:
            self.db.rollback()
            raise
