from typing import Optional
import logging

from sqlalchemy import delete, select

from storefront.domain.cart import CartLine, CartSnapshot
from storefront.models import CartItem, Product
from storefront.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class CartRepository(BaseRepository[CartItem]):
    """Repository for shopping cart rows"""

    model = CartItem

    def get_snapshot(self, user_id: int, lock: bool = False) -> CartSnapshot:
        """
        Load the user's cart joined with current product prices.

        With lock=True the cart rows are selected FOR UPDATE, so a concurrent
        checkout for the same user waits here until this transaction ends and
        then sees the rows already deleted.
        """
        stmt = (
            select(CartItem, Product)
            .join(Product, Product.id == CartItem.product_id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.id)
        )
        if lock:
            stmt = stmt.with_for_update(of=CartItem)

        with self.translate_errors("SELECT"):
            rows = self.session.execute(stmt).all()

        return CartSnapshot(
            user_id=user_id,
            lines=[self._to_line(item, product) for item, product in rows],
        )

    def get_item(self, user_id: int, cart_item_id: int) -> Optional[CartItem]:
        """Get a cart row only if it belongs to user_id"""
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(CartItem).where(
                    CartItem.id == cart_item_id, CartItem.user_id == user_id
                )
            ).scalar_one_or_none()

    def find_variant(self, user_id: int, product_id: int, size: str, color: str) -> Optional[CartItem]:
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(CartItem).where(
                    CartItem.user_id == user_id,
                    CartItem.product_id == product_id,
                    CartItem.size == size,
                    CartItem.color == color,
                )
            ).scalar_one_or_none()

    def add_item(self, user_id: int, product_id: int, quantity: int, size: str, color: str) -> CartItem:
        """Add a variant, or bump the quantity of the existing row for it"""
        existing = self.find_variant(user_id, product_id, size, color)
        if existing is not None:
            existing.quantity += quantity
            with self.translate_errors("UPDATE"):
                self.session.flush()
            return existing

        return self.add(CartItem(
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
            size=size,
            color=color,
        ))

    def clear(self, user_id: int) -> int:
        """Delete every cart row for the user; returns the number removed"""
        with self.translate_errors("DELETE"):
            result = self.session.execute(
                delete(CartItem).where(CartItem.user_id == user_id)
            )
            return result.rowcount or 0

    @staticmethod
    def _to_line(item: CartItem, product: Product) -> CartLine:
        return CartLine(
            cart_item_id=item.id,
            product_id=product.id,
            product_name=product.name,
            shop_id=product.shop_id,
            unit_price=product.price_paise,
            original_price=product.original_price_paise,
            quantity=item.quantity,
            size=item.size or "",
            color=item.color or "",
            stock_quantity=product.stock_quantity,
            image_url=product.image_url,
            updated_at=item.updated_at,
        )
