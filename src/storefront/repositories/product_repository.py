from typing import List, Optional
import logging

from sqlalchemy import Text, cast, select

from storefront.models import Brand, Category, Product
from storefront.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

SORT_ORDERS = {
    "newest": (Product.created_at.desc(), Product.id.desc()),
    "price_asc": (Product.price_paise.asc(), Product.id.asc()),
    "price_desc": (Product.price_paise.desc(), Product.id.desc()),
}


class ProductRepository(BaseRepository[Product]):
    """Repository for catalogue queries"""

    model = Product

    def search(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        brand: Optional[str] = None,
        min_price: Optional[int] = None,
        max_price: Optional[int] = None,
        size: Optional[str] = None,
        color: Optional[str] = None,
        featured: Optional[bool] = None,
        sort: str = "newest",
        limit: int = 20,
        offset: int = 0,
    ) -> List[Product]:
        """
        Active products matching every given filter.

        category and brand are slugs. size/color match an entry of the
        product's JSON list through its text form, which works the same on
        PostgreSQL JSONB and SQLite JSON.
        """
        stmt = select(Product).where(Product.is_active.is_(True))

        if query:
            escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            pattern = f"%{escaped}%"
            stmt = stmt.where(
                Product.name.ilike(pattern, escape="\\") | Product.description.ilike(pattern, escape="\\")
            )
        if category:
            stmt = stmt.join(Category, Category.id == Product.category_id).where(Category.slug == category)
        if brand:
            stmt = stmt.join(Brand, Brand.id == Product.brand_id).where(Brand.slug == brand)
        if min_price is not None:
            stmt = stmt.where(Product.price_paise >= min_price)
        if max_price is not None:
            stmt = stmt.where(Product.price_paise <= max_price)
        if size:
            stmt = stmt.where(cast(Product.sizes, Text).like(f'%"{size}"%'))
        if color:
            stmt = stmt.where(cast(Product.colors, Text).like(f'%"{color}"%'))
        if featured is not None:
            stmt = stmt.where(Product.is_featured.is_(featured))

        stmt = stmt.order_by(*SORT_ORDERS.get(sort, SORT_ORDERS["newest"])).limit(limit).offset(offset)

        with self.translate_errors("SELECT"):
            return list(self.session.execute(stmt).scalars())

    def list_for_shop(self, shop_id: int) -> List[Product]:
        with self.translate_errors("SELECT"):
            return list(self.session.execute(
                select(Product)
                .where(Product.shop_id == shop_id)
                .order_by(Product.created_at.desc(), Product.id.desc())
            ).scalars())

    def list_admin(self, status: Optional[str] = None) -> List[Product]:
        """All products for the admin console; status is active, inactive or featured"""
        stmt = select(Product)
        if status == "active":
            stmt = stmt.where(Product.is_active.is_(True))
        elif status == "inactive":
            stmt = stmt.where(Product.is_active.is_(False))
        elif status == "featured":
            stmt = stmt.where(Product.is_featured.is_(True))
        stmt = stmt.order_by(Product.created_at.desc(), Product.id.desc())

        with self.translate_errors("SELECT"):
            return list(self.session.execute(stmt).scalars())

    def slug_taken(self, shop_id: int, slug: str) -> bool:
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(Product.id).where(Product.shop_id == shop_id, Product.slug == slug)
            ).first() is not None
