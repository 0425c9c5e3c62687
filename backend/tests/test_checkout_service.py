"""Checkout orchestration over the SQL store and over the in-memory store."""
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from database import Base
from models.cart import CartItem
from models.product import Product, ProductCategory
from models.history import TransactionHistory
from models.users import User
from services.checkout import CheckoutService
from services.errors import EmptyCart, InsufficientPoints, InvalidInput, NotFound, StorageFailure
from services.stores import SqlCheckoutStore


def _cart_count(db, user_id):
    return db.query(CartItem).filter(CartItem.user_id == user_id).count()


def _history_count(db, user_id):
    return db.query(TransactionHistory).filter(TransactionHistory.user_id == user_id).count()


class TestSqlCheckout:
    def test_end_to_end_total_and_side_effects(self, db, make_user, make_product, make_campaign, add_to_cart):
        user = make_user(point=25)
        product_a = make_product(price=20.0)
        product_b = make_product(price=15.0)
        add_to_cart(user, product_a, 2)
        add_to_cart(user, product_b, 1)
        campaign = make_campaign("fixed", discount_value=5)

        result = CheckoutService(SqlCheckoutStore(db)).checkout(user.id, [campaign.id], 10)

        assert result.subtotal == 55.0
        assert result.discount == 5.0
        assert result.total_price == 40.0
        assert result.message == "Checkout successful"

        db.expire_all()
        assert db.get(User, user.id).point == 15
        assert _cart_count(db, user.id) == 0

        history = db.get(TransactionHistory, result.history_id)
        assert history.user_id == user.id
        assert history.point_used == 10
        assert sorted(p.product_id for p in history.products) == sorted([product_a.id, product_b.id])
        assert [c.campaign_id for c in history.campaigns] == [campaign.id]

    def test_total_never_negative(self, db, make_user, make_product, make_campaign, add_to_cart):
        user = make_user()
        add_to_cart(user, make_product(price=50.0), 1)
        first = make_campaign("fixed", discount_value=30)
        second = make_campaign("fixed", discount_value=50)

        result = CheckoutService(SqlCheckoutStore(db)).checkout(user.id, [first.id, second.id], 0)

        assert result.total_price == 0.0
        assert result.discount == 80.0

    def test_inactive_unknown_and_repeated_campaigns_are_skipped(
        self, db, make_user, make_product, make_campaign, add_to_cart
    ):
        user = make_user()
        add_to_cart(user, make_product(price=100.0), 1)
        active = make_campaign("percent", discount_value=10)
        inactive = make_campaign("fixed", discount_value=50, is_active=False)

        result = CheckoutService(SqlCheckoutStore(db)).checkout(
            user.id, [active.id, active.id, inactive.id, "not-a-campaign"], 0
        )

        assert result.total_price == 90.0
        history = db.get(TransactionHistory, result.history_id)
        assert [c.campaign_id for c in history.campaigns] == [active.id]

    def test_uses_current_product_price(self, db, make_user, make_product, add_to_cart):
        user = make_user()
        product = make_product(price=10.0)
        add_to_cart(user, product, 3)
        product.price = 12.0
        db.commit()

        result = CheckoutService(SqlCheckoutStore(db)).checkout(user.id, [], 0)

        assert result.total_price == 36.0

    def test_empty_cart_is_rejected_without_history(self, db, make_user):
        user = make_user(point=10)

        with pytest.raises(EmptyCart):
            CheckoutService(SqlCheckoutStore(db)).checkout(user.id, [], 5)

        assert _history_count(db, user.id) == 0
        db.expire_all()
        assert db.get(User, user.id).point == 10

    def test_insufficient_points_rejected_before_mutation(self, db, make_user, make_product, add_to_cart):
        user = make_user(point=5)
        add_to_cart(user, make_product(price=20.0), 1)

        with pytest.raises(InsufficientPoints):
            CheckoutService(SqlCheckoutStore(db)).checkout(user.id, [], 6)

        db.expire_all()
        assert db.get(User, user.id).point == 5
        assert _cart_count(db, user.id) == 1
        assert _history_count(db, user.id) == 0

    def test_unknown_user_with_orphan_cart_is_not_found(self, db, make_user, make_product, add_to_cart):
        user = make_user()
        add_to_cart(user, make_product(price=20.0), 1)
        db.query(User).filter(User.id == user.id).delete()
        db.commit()

        with pytest.raises(NotFound):
            CheckoutService(SqlCheckoutStore(db)).checkout(user.id, [], 0)

    @pytest.mark.parametrize("user_id", ["", "   ", None])
    def test_blank_user_id_is_invalid(self, db, user_id):
        with pytest.raises(InvalidInput):
            CheckoutService(SqlCheckoutStore(db)).checkout(user_id, [], 0)

    def test_negative_points_are_invalid_even_with_empty_cart(self, db, make_user):
        user = make_user(point=10)

        with pytest.raises(InvalidInput):
            CheckoutService(SqlCheckoutStore(db)).checkout(user.id, [], -1)

    def test_negative_points_are_invalid(self, db, make_user, make_product, add_to_cart):
        user = make_user(point=10)
        add_to_cart(user, make_product(price=20.0), 1)

        with pytest.raises(InvalidInput):
            CheckoutService(SqlCheckoutStore(db)).checkout(user.id, [], -1)

    def test_commit_failure_rolls_back_every_write(self, db, make_user, make_product, add_to_cart):
        class ClearCartFails(SqlCheckoutStore):
            def clear_cart(self, user_id):
                super().clear_cart(user_id)
                raise SQLAlchemyError("connection dropped")

        user = make_user(point=30)
        add_to_cart(user, make_product(price=20.0), 1)
        add_to_cart(user, make_product(price=5.0), 2)

        with pytest.raises(StorageFailure):
            CheckoutService(ClearCartFails(db)).checkout(user.id, [], 30)

        db.expire_all()
        assert db.get(User, user.id).point == 30
        assert _cart_count(db, user.id) == 2
        assert _history_count(db, user.id) == 0


class TestSqlStoreGuards:
    def test_conditional_debit_refuses_overdraw(self, db, make_user):
        user = make_user(point=100)
        store = SqlCheckoutStore(db)

        assert store.debit_points(user.id, 150) is False
        assert store.debit_points(user.id, 100) is True
        db.commit()

        db.expire_all()
        assert db.get(User, user.id).point == 0

    def test_load_cart_skips_lines_without_product(self, db, make_user, make_product, add_to_cart):
        user = make_user()
        product = make_product(price=10.0)
        add_to_cart(user, product, 2)
        db.add(CartItem(user_id=user.id, product_id="missing-product", quantity=1))
        db.commit()

        lines = SqlCheckoutStore(db).load_cart(user.id)

        assert [(line.product_id, line.quantity, line.unit_price) for line in lines] == [(product.id, 2, 10.0)]


class TestSqlStoreRace:
    def test_concurrent_checkouts_debit_points_once(self, tmp_path):
        engine = create_engine(
            f"sqlite:///{tmp_path / 'race.db'}",
            connect_args={"check_same_thread": False, "timeout": 10},
        )
        Base.metadata.create_all(bind=engine)
        Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

        setup = Session()
        category = ProductCategory(name="race")
        setup.add(category)
        setup.flush()
        product = Product(name="console", product_category_id=category.id, price=300.0)
        user = User(first_name="Race", last_name="User", point=100)
        setup.add_all([product, user])
        setup.flush()
        setup.add(CartItem(user_id=user.id, product_id=product.id, quantity=1))
        setup.commit()
        user_id = user.id
        setup.close()

        barrier = threading.Barrier(2)

        class LinedUpStore(SqlCheckoutStore):
            def debit_points(self, user_id, amount):
                # Both attempts have passed validation before either debits
                barrier.wait(timeout=5)
                return super().debit_points(user_id, amount)

        def attempt():
            session = Session()
            try:
                CheckoutService(LinedUpStore(session)).checkout(user_id, [], 100)
                return "OK"
            except InsufficientPoints:
                return "InsufficientPoints"
            finally:
                session.close()

        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [pool.submit(attempt) for _ in range(2)]
            outcomes = sorted(f.result(timeout=30) for f in futures)

        check = Session()
        try:
            assert outcomes == ["InsufficientPoints", "OK"]
            assert check.get(User, user_id).point == 0
            assert _history_count(check, user_id) == 1
            assert _cart_count(check, user_id) == 0
        finally:
            check.close()
            engine.dispose()


class TestInMemoryCheckout:
    def test_end_to_end(self, memory_store):
        user = memory_store.add_user(point=100)
        memory_store.add_line(user.id, unit_price=20.0, quantity=2)
        memory_store.add_line(user.id, unit_price=15.0, quantity=1)
        campaign = memory_store.add_campaign("fixed", discount_value=5)

        result = CheckoutService(memory_store).checkout(user.id, [campaign.id], 10)

        assert result.total_price == 40.0
        assert memory_store.users[user.id].point == 90
        assert memory_store.carts.get(user.id) is None
        assert memory_store.histories[0].campaign_ids == [campaign.id]
        assert len(memory_store.histories[0].product_ids) == 2

    def test_concurrent_checkouts_for_same_user_debit_once(self, racing_store):
        user = racing_store.add_user(point=100)
        racing_store.add_line(user.id, unit_price=300.0, quantity=1)
        service = CheckoutService(racing_store)

        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [pool.submit(service.checkout, user.id, [], 100) for _ in range(2)]
            outcomes = [f.exception(timeout=10) for f in futures]

        successes = [o for o in outcomes if o is None]
        failures = [o for o in outcomes if o is not None]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], InsufficientPoints)
        assert racing_store.users[user.id].point == 0
        assert len(racing_store.histories) == 1

    def test_different_users_do_not_interfere(self, memory_store):
        alice = memory_store.add_user(point=50)
        bob = memory_store.add_user(point=50)
        memory_store.add_line(alice.id, unit_price=10.0, quantity=1)
        memory_store.add_line(bob.id, unit_price=30.0, quantity=1)
        service = CheckoutService(memory_store)

        with ThreadPoolExecutor(max_workers=2) as pool:
            alice_result = pool.submit(service.checkout, alice.id, [], 50).result(timeout=10)
            bob_result = pool.submit(service.checkout, bob.id, [], 20).result(timeout=10)

        assert alice_result.total_price == 0.0
        assert bob_result.total_price == 10.0
        assert memory_store.users[alice.id].point == 0
        assert memory_store.users[bob.id].point == 30
        assert {h.user_id for h in memory_store.histories} == {alice.id, bob.id}
