from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from storefront.core.exceptions import ConflictError, NotFoundError, ValidationError
from storefront.models import Order, Product, Shop
from storefront.repositories import OrderRepository, ProductRepository, ShopRepository
from storefront.schemas.order_schemas import OrderListResponse
from storefront.services.order_reader import present_order_page
from storefront.services.order_status import OrderStatusService
from storefront.utils.formatting import discount_percentage, slugify

logger = logging.getLogger(__name__)

SHOP_FIELDS = (
    "name", "description", "phone", "email", "address_line_1", "address_line_2",
    "city", "state", "postal_code", "business_type", "latitude", "longitude",
)
PRODUCT_FIELDS = (
    "name", "description", "price_paise", "original_price_paise", "stock_quantity",
    "sizes", "colors", "image_url", "category_id", "brand_id", "is_active",
)


class SellerService:
    """
    Seller console: one shop per seller, its products and the orders that
    include them.

    Business Rules:
    - Shop and product slugs are derived from their names and made unique
    - discount_percentage is recomputed whenever price or original price changes
    - Sellers only see and move orders containing their shop's items
    """

    def __init__(self, session: Session):
        self.session = session
        self.shop_repo = ShopRepository(session)
        self.product_repo = ProductRepository(session)
        self.order_repo = OrderRepository(session)

    def register_shop(self, seller_id: int, data: Dict[str, Any]) -> Shop:
        if self.shop_repo.get_by_seller(seller_id) is not None:
            raise ConflictError("You already have a shop", conflict_field="seller_id")

        base = slugify(data["name"])
        if not base:
            raise ValidationError("Invalid shop name", [{"field": "name", "message": "Name must contain letters or digits"}])
        slug = base
        suffix = 2
        while self.shop_repo.get_by_slug(slug) is not None:
            slug = f"{base}-{suffix}"
            suffix += 1

        shop = self.shop_repo.add(Shop(
            seller_id=seller_id,
            slug=slug,
            **{k: data.get(k) for k in SHOP_FIELDS},
        ))
        self.session.commit()
        logger.info(f"Seller {seller_id} registered shop {shop.id} ({slug})")
        return shop

    def get_shop(self, seller_id: int) -> Shop:
        shop = self.shop_repo.get_by_seller(seller_id)
        if shop is None:
            raise NotFoundError("Shop")
        return shop

    def dashboard(self, seller_id: int) -> Dict[str, Any]:
        shop = self.get_shop(seller_id)
        products = self.product_repo.list_for_shop(shop.id)
        return {
            "shop_id": shop.id,
            "product_count": len(products),
            "active_product_count": sum(1 for p in products if p.is_active),
            "low_stock_product_ids": [p.id for p in products if p.stock_quantity < 5],
            **self.order_repo.shop_sales(shop.id),
        }

    def list_products(self, seller_id: int) -> List[Product]:
        shop = self.get_shop(seller_id)
        return self.product_repo.list_for_shop(shop.id)

    def create_product(self, seller_id: int, data: Dict[str, Any]) -> Product:
        shop = self.get_shop(seller_id)

        base = slugify(data["name"])
        if not base:
            raise ValidationError("Invalid product name", [{"field": "name", "message": "Name must contain letters or digits"}])
        slug = base
        suffix = 2
        while self.product_repo.slug_taken(shop.id, slug):
            slug = f"{base}-{suffix}"
            suffix += 1

        values = {k: data[k] for k in PRODUCT_FIELDS if k in data}
        values.setdefault("sizes", [])
        values.setdefault("colors", [])
        product = self.product_repo.add(Product(
            shop_id=shop.id,
            slug=slug,
            discount_percentage=discount_percentage(data["price_paise"], data.get("original_price_paise")),
            **values,
        ))
        self.session.commit()
        logger.info(f"Shop {shop.id} listed product {product.id} ({slug})")
        return product

    def update_product(self, seller_id: int, product_id: int, data: Dict[str, Any]) -> Product:
        shop = self.get_shop(seller_id)
        product = self.product_repo.get_by_id(product_id)
        if product is None or product.shop_id != shop.id:
            raise NotFoundError("Product", str(product_id))

        for key in PRODUCT_FIELDS:
            if key in data:
                setattr(product, key, data[key])
        product.discount_percentage = discount_percentage(product.price_paise, product.original_price_paise)

        with self.product_repo.translate_errors("UPDATE"):
            self.session.commit()
        return product

    def list_orders(self, seller_id: int, status: Optional[str] = None, limit: int = 20, after: Optional[int] = None) -> OrderListResponse:
        shop = self.get_shop(seller_id)
        orders = self.order_repo.list_orders(shop_id=shop.id, status=status, limit=limit, after=after)
        return present_order_page(orders, limit)

    def update_order_status(self, seller_id: int, order_id: int, status: str) -> Order:
        return OrderStatusService(self.session).update_as_seller(seller_id, order_id, status)
