"""Tests for cart snapshots and formatting helpers."""

from datetime import datetime, timezone

from storefront.domain.cart import CartLine, CartSnapshot
from storefront.utils.formatting import discount_percentage, slugify


def make_line(cart_item_id, quantity=1, **kwargs):
    return CartLine(
        cart_item_id=cart_item_id,
        product_id=cart_item_id * 10,
        product_name=f"Item {cart_item_id}",
        shop_id=1,
        unit_price=kwargs.pop("unit_price", 1000),
        quantity=quantity,
        **kwargs,
    )


class TestCartSnapshot:
    def test_fingerprint_is_stable_and_order_independent(self):
        a = CartSnapshot(user_id=7, lines=[make_line(1), make_line(2, quantity=3)])
        b = CartSnapshot(user_id=7, lines=[make_line(2, quantity=3), make_line(1)])
        assert a.fingerprint() == b.fingerprint()
        assert a.fingerprint().startswith("cart-")

    def test_fingerprint_changes_with_contents(self):
        base = CartSnapshot(user_id=7, lines=[make_line(1)])
        assert base.fingerprint() != CartSnapshot(user_id=7, lines=[make_line(1, quantity=2)]).fingerprint()
        assert base.fingerprint() != CartSnapshot(user_id=8, lines=[make_line(1)]).fingerprint()

    def test_fingerprint_changes_when_cart_is_touched(self):
        early = datetime(2024, 5, 1, tzinfo=timezone.utc)
        late = datetime(2024, 5, 2, tzinfo=timezone.utc)
        a = CartSnapshot(user_id=7, lines=[make_line(1, updated_at=early)])
        b = CartSnapshot(user_id=7, lines=[make_line(1, updated_at=late)])
        assert a.fingerprint() != b.fingerprint()

    def test_totals(self):
        cart = CartSnapshot(user_id=1, lines=[make_line(1, quantity=2), make_line(2, quantity=3, unit_price=500)])
        assert cart.total_quantity == 5
        assert [line.subtotal for line in cart.lines] == [2000, 1500]
        assert not cart.is_empty
        assert CartSnapshot(user_id=1).is_empty

    def test_line_to_dict_reports_stock(self):
        line = make_line(1, quantity=4, stock_quantity=3, size="M")
        as_dict = line.to_dict()
        assert as_dict["in_stock"] is False
        assert as_dict["size"] == "M"
        assert as_dict["color"] is None


class TestFormatting:
    def test_slugify(self):
        assert slugify("Summer Linen  Shirt!") == "summer-linen-shirt"
        assert slugify("  Indigo & Co. ") == "indigo-co"
        assert slugify("!!!") == ""

    def test_discount_percentage(self):
        assert discount_percentage(80000, 100000) == 20
        assert discount_percentage(129900, 159900) == 19
        assert discount_percentage(100000, None) == 0
        assert discount_percentage(100000, 90000) == 0
