from typing import Any, Dict, List
import logging

from sqlalchemy.orm import Session

from storefront.core.exceptions import NotFoundError
from storefront.repositories import ProductRepository, ShopRepository
from storefront.schemas.catalog_schemas import NearbyShopResponse, ProductResponse, ShopResponse

logger = logging.getLogger(__name__)


class CatalogService:
    """Buyer-facing browsing: product search, product pages, shop discovery"""

    def __init__(self, session: Session):
        self.product_repo = ProductRepository(session)
        self.shop_repo = ShopRepository(session)

    def search_products(self, filters: Dict[str, Any]) -> List[ProductResponse]:
        products = self.product_repo.search(**filters)
        logger.info(f"Product search {filters} returned {len(products)} rows")
        return [ProductResponse.model_validate(p) for p in products]

    def get_product(self, product_id: int) -> ProductResponse:
        product = self.product_repo.get_by_id(product_id)
        if product is None or not product.is_active:
            raise NotFoundError("Product", str(product_id))
        return ProductResponse.model_validate(product)

    def get_shop(self, slug: str) -> Dict[str, Any]:
        shop = self.shop_repo.get_by_slug(slug)
        if shop is None:
            raise NotFoundError("Shop", slug)
        products = [p for p in self.product_repo.list_for_shop(shop.id) if p.is_active]
        return {
            "shop": ShopResponse.model_validate(shop).model_dump(mode="json"),
            "products": [ProductResponse.model_validate(p).model_dump(mode="json") for p in products],
        }

    def nearby_shops(self, latitude: float, longitude: float, radius_km: float, limit: int) -> List[NearbyShopResponse]:
        """Ranked shops within radius_km; ranking is the database procedure's job"""
        rows = self.shop_repo.find_nearby(latitude, longitude, radius_km, limit)
        return [NearbyShopResponse(**row) for row in rows[:limit]]
