import os

# Point the app at a throwaway database before anything imports config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import threading
import uuid
from contextlib import contextmanager
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models.users import User
from models.product import Product, ProductCategory
from models.cart import CartItem
from models.campaign import Campaign
from services.stores import CheckoutStore, CartLine


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    def _make(point=0, email=None, is_guest=False):
        user = User(email=email, first_name="Test", last_name="User", point=point, is_guest=is_guest)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture()
def make_category(db):
    def _make(name=None):
        category = ProductCategory(name=name or f"cat-{uuid.uuid4().hex[:8]}")
        db.add(category)
        db.commit()
        db.refresh(category)
        return category
    return _make


@pytest.fixture()
def make_product(db, make_category):
    def _make(price, name=None, category=None, is_active=True):
        category = category or make_category()
        product = Product(
            name=name or f"product-{uuid.uuid4().hex[:8]}",
            product_category_id=category.id,
            price=price,
            is_active=is_active,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make


@pytest.fixture()
def make_campaign(db):
    def _make(discount_type, discount_value=0.0, every=0.0, limit=0.0, is_active=True, name=None):
        campaign = Campaign(
            name=name or f"{discount_type}-{uuid.uuid4().hex[:6]}",
            discount_type=discount_type,
            discount_value=discount_value,
            every=every,
            limit=limit,
            is_active=is_active,
        )
        db.add(campaign)
        db.commit()
        db.refresh(campaign)
        return campaign
    return _make


@pytest.fixture()
def add_to_cart(db):
    def _add(user, product, quantity=1):
        item = CartItem(user_id=user.id, product_id=product.id, quantity=quantity, price_at_add=product.price)
        db.add(item)
        db.commit()
        return item
    return _add


class InMemoryStore(CheckoutStore):
    """Thread-safe dict-backed store; ``debit_barrier`` lines up concurrent debits."""

    def __init__(self, debit_barrier=None):
        self.users = {}
        self.carts = {}
        self.campaigns = {}
        self.histories = []
        self.debit_barrier = debit_barrier
        self._lock = threading.Lock()

    def add_user(self, point):
        user = SimpleNamespace(id=str(uuid.uuid4()), point=point)
        self.users[user.id] = user
        return user

    def add_line(self, user_id, unit_price, quantity, product_id=None):
        line = CartLine(product_id=product_id or str(uuid.uuid4()), name="item", unit_price=unit_price, quantity=quantity)
        self.carts.setdefault(user_id, []).append(line)
        return line

    def add_campaign(self, discount_type, discount_value=0.0, every=0.0, limit=0.0, is_active=True):
        campaign = SimpleNamespace(
            id=str(uuid.uuid4()), discount_type=discount_type, discount_value=discount_value,
            every=every, limit=limit, is_active=is_active,
        )
        self.campaigns[campaign.id] = campaign
        return campaign

    def load_cart(self, user_id):
        with self._lock:
            return list(self.carts.get(user_id, []))

    def get_user(self, user_id):
        with self._lock:
            user = self.users.get(user_id)
            return SimpleNamespace(id=user.id, point=user.point) if user else None

    def find_active_campaigns(self, campaign_ids):
        found = [self.campaigns.get(cid) for cid in campaign_ids]
        return [c for c in found if c is not None and c.is_active]

    def debit_points(self, user_id, amount):
        if self.debit_barrier is not None:
            self.debit_barrier.wait(timeout=5)
        with self._lock:
            user = self.users[user_id]
            if user.point < amount:
                return False
            user.point -= amount
            return True

    def record_history(self, user_id, points_used, product_ids, campaign_ids):
        history = SimpleNamespace(
            id=str(uuid.uuid4()), user_id=user_id, point_used=points_used,
            product_ids=list(product_ids), campaign_ids=list(campaign_ids),
        )
        with self._lock:
            self.histories.append(history)
        return history

    def clear_cart(self, user_id):
        with self._lock:
            return len(self.carts.pop(user_id, []))

    @contextmanager
    def unit_of_work(self):
        yield


@pytest.fixture()
def memory_store():
    return InMemoryStore()


@pytest.fixture()
def racing_store():
    return InMemoryStore(debit_barrier=threading.Barrier(2))
