from typing import List
import logging

from sqlalchemy.orm import Session

from storefront.core.exceptions import NotFoundError
from storefront.models import WishlistItem
from storefront.repositories import ProductRepository, WishlistRepository
from storefront.schemas.catalog_schemas import ProductResponse, WishlistItemResponse

logger = logging.getLogger(__name__)


class WishlistService:
    def __init__(self, session: Session):
        self.session = session
        self.wishlist_repo = WishlistRepository(session)
        self.product_repo = ProductRepository(session)

    def list_items(self, user_id: int) -> List[WishlistItemResponse]:
        return [
            WishlistItemResponse(
                wishlist_item_id=item.id,
                product=ProductResponse.model_validate(product),
            )
            for item, product in self.wishlist_repo.list_for_user(user_id)
        ]

    def toggle(self, user_id: int, product_id: int) -> str:
        """Add the product if it is not wished for yet, otherwise remove it. Returns 'added' or 'removed'."""
        existing = self.wishlist_repo.find(user_id, product_id)
        if existing is not None:
            self.wishlist_repo.delete(existing)
            action = "removed"
        else:
            if self.product_repo.get_by_id(product_id) is None:
                raise NotFoundError("Product", str(product_id))
            self.wishlist_repo.add(WishlistItem(user_id=user_id, product_id=product_id))
            action = "added"

        self.session.commit()
        logger.info(f"Wishlist {action} product {product_id} for user {user_id}")
        return action
