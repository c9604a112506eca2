"""Tests for atomic order placement."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from storefront.core.config import CheckoutConfig
from storefront.core.exceptions import CartEmptyError, OrderCreationFailed, ValidationError
from storefront.models import Order, OrderItem
from storefront.repositories import CartRepository, OrderRepository
from storefront.services import AddressService, CartService, OrderWriter


def order_count(session):
    return session.execute(select(func.count()).select_from(Order)).scalar_one()


def item_count(session):
    return session.execute(select(func.count()).select_from(OrderItem)).scalar_one()


@pytest.fixture
def checkout():
    return CheckoutConfig()


@pytest.fixture
def fill_cart(session, checkout, data, make_product):
    """Put two units of a 500-rupee product and one 300-rupee product in the buyer's cart."""
    def _fill():
        p500 = make_product(50000, name="Cotton Shirt")
        p300 = make_product(30000, name="Silk Scarf")
        carts = CartService(session, checkout)
        carts.add_item(data.buyer_id, p500, 2)
        carts.add_item(data.buyer_id, p300, 1)
        return p500, p300
    return _fill


class TestPlaceOrder:
    def test_success_writes_order_items_and_clears_cart(self, session, checkout, data, fill_cart):
        fill_cart()
        placed = OrderWriter(session, checkout).place_order(data.buyer_id, data.address_id, "upi")

        order = placed.order
        assert placed.replayed is False
        assert order.status == "confirmed"
        assert order.subtotal_paise == 130000
        assert order.shipping_paise == 0
        assert order.total_paise == order.subtotal_paise + order.shipping_paise
        assert sum(i.subtotal_paise for i in order.items) == order.total_paise - order.shipping_paise
        assert len(order.items) == 2
        assert order.shipping_address["id"] == data.address_id
        assert order.idempotency_key.startswith("cart-")

        assert CartRepository(session).get_snapshot(data.buyer_id).is_empty
        assert order_count(session) == 1

    def test_line_items_snapshot_price_and_name(self, session, checkout, data, fill_cart):
        p500, _ = fill_cart()
        order = OrderWriter(session, checkout).place_order(data.buyer_id, data.address_id, "card").order

        shirt = next(i for i in order.items if i.product_id == p500)
        assert shirt.product_name == "Cotton Shirt"
        assert shirt.price_paise == 50000
        assert shirt.quantity == 2
        assert shirt.subtotal_paise == 100000
        assert shirt.shop_id == data.shop_id

    def test_small_order_pays_shipping(self, session, checkout, data, make_product):
        CartService(session, checkout).add_item(data.buyer_id, make_product(30000), 1)
        order = OrderWriter(session, checkout).place_order(data.buyer_id, data.address_id, "cash_on_delivery").order
        assert (order.subtotal_paise, order.shipping_paise, order.total_paise) == (30000, 9900, 39900)

    def test_empty_cart_rejected(self, session, checkout, data):
        with pytest.raises(CartEmptyError) as exc:
            OrderWriter(session, checkout).place_order(data.buyer_id, data.address_id, "upi")
        assert exc.value.status_code == 400
        assert exc.value.details["retryable"] is False
        assert order_count(session) == 0

    def test_manual_confirmation_starts_pending(self, session, data, fill_cart):
        checkout = CheckoutConfig(requires_manual_confirmation=True)
        fill_cart()
        order = OrderWriter(session, checkout).place_order(data.buyer_id, data.address_id, "upi").order
        assert order.status == "pending"


class TestSelection:
    def test_missing_address_rejected_before_any_write(self, session, checkout, data, fill_cart):
        fill_cart()
        with pytest.raises(ValidationError) as exc:
            OrderWriter(session, checkout).place_order(data.buyer_id, None, "upi")
        assert exc.value.field_errors[0]["field"] == "address_id"
        assert order_count(session) == 0
        assert len(CartRepository(session).get_snapshot(data.buyer_id).lines) == 2

    def test_foreign_address_rejected(self, session, checkout, data, fill_cart, make_user):
        fill_cart()
        stranger = make_user()
        with pytest.raises(ValidationError):
            OrderWriter(session, checkout).place_order(stranger, data.address_id, "upi")

    def test_unknown_payment_method_rejected(self, session, checkout, data, fill_cart):
        fill_cart()
        with pytest.raises(ValidationError) as exc:
            OrderWriter(session, checkout).place_order(data.buyer_id, data.address_id, "cheque")
        assert [e["field"] for e in exc.value.field_errors] == ["payment_method"]


class TestAtomicity:
    def test_failed_item_insert_leaves_no_order_and_cart_intact(self, session, checkout, data, fill_cart, monkeypatch):
        fill_cart()

        def broken(self, order, lines):
            raise SQLAlchemyError("insert into order_items failed")

        monkeypatch.setattr(OrderRepository, "add_line_items", broken)

        with pytest.raises(OrderCreationFailed) as exc:
            OrderWriter(session, checkout).place_order(data.buyer_id, data.address_id, "upi")

        assert exc.value.status_code == 503
        assert exc.value.details["retryable"] is True
        assert order_count(session) == 0
        assert item_count(session) == 0
        assert len(CartRepository(session).get_snapshot(data.buyer_id).lines) == 2

    def test_failed_cart_clear_rolls_back_order(self, session, checkout, data, fill_cart, monkeypatch):
        fill_cart()
        monkeypatch.setattr(CartRepository, "clear", lambda self, user_id: 0)

        with pytest.raises(OrderCreationFailed):
            OrderWriter(session, checkout).place_order(data.buyer_id, data.address_id, "upi")

        assert order_count(session) == 0
        assert item_count(session) == 0


class TestIdempotency:
    def test_same_key_returns_existing_order(self, session, checkout, data, fill_cart):
        fill_cart()
        writer = OrderWriter(session, checkout)
        first = writer.place_order(data.buyer_id, data.address_id, "upi", idempotency_key="req-1")
        second = writer.place_order(data.buyer_id, data.address_id, "upi", idempotency_key="req-1")

        assert second.replayed is True
        assert second.order.id == first.order.id
        assert order_count(session) == 1

    def test_second_submit_without_key_finds_empty_cart(self, session, checkout, data, fill_cart):
        fill_cart()
        writer = OrderWriter(session, checkout)
        writer.place_order(data.buyer_id, data.address_id, "upi")
        with pytest.raises(CartEmptyError):
            writer.place_order(data.buyer_id, data.address_id, "upi")
        assert order_count(session) == 1

    def test_key_is_scoped_per_user(self, session, checkout, data, fill_cart, make_user, make_product):
        fill_cart()
        first = OrderWriter(session, checkout).place_order(data.buyer_id, data.address_id, "upi", idempotency_key="shared")

        other = make_user()
        address = AddressService(session).create(other, {
            "full_name": "Other Buyer", "phone": "+91 90000 00000", "address_line_1": "1 MG Road",
            "city": "Pune", "state": "Maharashtra", "postal_code": "411001",
        })
        CartService(session, checkout).add_item(other, make_product(20000), 1)
        second = OrderWriter(session, checkout).place_order(other, address.id, "upi", idempotency_key="shared")

        assert second.replayed is False
        assert second.order.id != first.order.id
        assert order_count(session) == 2

    def test_concurrent_insert_with_same_key_resolves_to_winner(self, session, checkout, data, fill_cart, make_product, monkeypatch):
        fill_cart()
        writer = OrderWriter(session, checkout)
        winner = writer.place_order(data.buyer_id, data.address_id, "upi", idempotency_key="race")

        CartService(session, checkout).add_item(data.buyer_id, make_product(20000), 1)

        # The losing request checked for the key before the winner committed.
        real_find = OrderRepository.find_by_idempotency_key
        calls = []

        def stale_find(self, user_id, key):
            calls.append(key)
            if len(calls) == 1:
                return None
            return real_find(self, user_id, key)

        monkeypatch.setattr(OrderRepository, "find_by_idempotency_key", stale_find)

        loser = writer.place_order(data.buyer_id, data.address_id, "upi", idempotency_key="race")

        assert loser.replayed is True
        assert loser.order.id == winner.order.id
        assert order_count(session) == 1
        assert len(CartRepository(session).get_snapshot(data.buyer_id).lines) == 1

    def test_same_key_after_winner_cleared_cart_replays(self, session, checkout, data, fill_cart, monkeypatch):
        fill_cart()
        writer = OrderWriter(session, checkout)
        winner = writer.place_order(data.buyer_id, data.address_id, "upi", idempotency_key="race")

        # The losing request looked up the key before the winner committed,
        # then found the cart already cleared once it got the lock.
        real_find = OrderRepository.find_by_idempotency_key
        calls = []

        def stale_find(self, user_id, key):
            calls.append(key)
            if len(calls) == 1:
                return None
            return real_find(self, user_id, key)

        monkeypatch.setattr(OrderRepository, "find_by_idempotency_key", stale_find)

        loser = writer.place_order(data.buyer_id, data.address_id, "upi", idempotency_key="race")

        assert loser.replayed is True
        assert loser.order.id == winner.order.id
        assert calls == ["race", "race"]
        assert order_count(session) == 1
        assert item_count(session) == 2

    def test_empty_cart_with_unknown_key_is_rejected(self, session, checkout, data):
        with pytest.raises(CartEmptyError):
            OrderWriter(session, checkout).place_order(data.buyer_id, data.address_id, "upi", idempotency_key="fresh")
        assert order_count(session) == 0


class TestRetry:
    def test_transient_error_is_retried(self, session, checkout, data, fill_cart, monkeypatch):
        fill_cart()
        real_add = OrderRepository.add_line_items
        attempts = []

        def flaky(self, order, lines):
            attempts.append(order.id)
            if len(attempts) == 1:
                raise OperationalError("INSERT INTO order_items", {}, Exception("database is locked"))
            return real_add(self, order, lines)

        monkeypatch.setattr(OrderRepository, "add_line_items", flaky)
        sleeps = []

        placed = OrderWriter(session, checkout, sleep=sleeps.append).place_order(
            data.buyer_id, data.address_id, "upi"
        )

        assert len(attempts) == 2
        assert sleeps == [checkout.retry_base_delay]
        assert len(placed.order.items) == 2
        assert order_count(session) == 1

    def test_gives_up_after_max_attempts(self, session, data, fill_cart, monkeypatch):
        checkout = CheckoutConfig(max_attempts=3, retry_base_delay=0.1, retry_max_delay=0.15)
        fill_cart()

        def always_locked(self, order, lines):
            raise OperationalError("INSERT INTO order_items", {}, Exception("database is locked"))

        monkeypatch.setattr(OrderRepository, "add_line_items", always_locked)
        sleeps = []

        with pytest.raises(OrderCreationFailed):
            OrderWriter(session, checkout, sleep=sleeps.append).place_order(
                data.buyer_id, data.address_id, "upi"
            )

        assert sleeps == [0.1, 0.15]
        assert order_count(session) == 0
        assert len(CartRepository(session).get_snapshot(data.buyer_id).lines) == 2

    def test_validation_errors_are_not_retried(self, session, checkout, data, fill_cart):
        fill_cart()
        sleeps = []
        with pytest.raises(ValidationError):
            OrderWriter(session, checkout, sleep=sleeps.append).place_order(data.buyer_id, 999999, "upi")
        assert sleeps == []
