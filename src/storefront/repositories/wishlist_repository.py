from typing import List, Optional, Tuple

from sqlalchemy import select

from storefront.models import Product, WishlistItem
from storefront.repositories.base import BaseRepository


class WishlistRepository(BaseRepository[WishlistItem]):
    model = WishlistItem

    def list_for_user(self, user_id: int) -> List[Tuple[WishlistItem, Product]]:
        with self.translate_errors("SELECT"):
            rows = self.session.execute(
                select(WishlistItem, Product)
                .join(Product, Product.id == WishlistItem.product_id)
                .where(WishlistItem.user_id == user_id)
                .order_by(WishlistItem.created_at.desc(), WishlistItem.id.desc())
            ).all()
        return [(item, product) for item, product in rows]

    def find(self, user_id: int, product_id: int) -> Optional[WishlistItem]:
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(WishlistItem).where(
                    WishlistItem.user_id == user_id,
                    WishlistItem.product_id == product_id,
                )
            ).scalar_one_or_none()
