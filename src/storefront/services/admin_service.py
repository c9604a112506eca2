from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from storefront.core.exceptions import NotFoundError
from storefront.models import Order, Product, Shop, User
from storefront.repositories import OrderRepository, ProductRepository, ShopRepository, UserRepository
from storefront.schemas.order_schemas import OrderListResponse
from storefront.services.order_reader import present_order_page
from storefront.services.order_status import OrderStatusService

logger = logging.getLogger(__name__)


class AdminService:
    """Admin console: marketplace overview, order moderation, product flags"""

    recent_order_count = 5

    def __init__(self, session: Session):
        self.session = session
        self.order_repo = OrderRepository(session)
        self.product_repo = ProductRepository(session)
        self.shop_repo = ShopRepository(session)
        self.user_repo = UserRepository(session)

    def dashboard(self) -> Dict[str, Any]:
        status_counts = self.order_repo.status_counts()
        recent = self.order_repo.list_orders(limit=self.recent_order_count)
        return {
            "user_count": self.user_repo.count(),
            "seller_count": self.user_repo.count(User.role == "seller"),
            "shop_count": self.shop_repo.count(),
            "product_count": self.product_repo.count(),
            "active_product_count": self.product_repo.count(Product.is_active.is_(True)),
            "order_count": sum(status_counts.values()),
            "orders_by_status": status_counts,
            "revenue_paise": self.order_repo.revenue(),
            "recent_orders": present_order_page(recent, self.recent_order_count).items,
        }

    def list_orders(self, status: Optional[str] = None, limit: int = 20, after: Optional[int] = None) -> OrderListResponse:
        orders = self.order_repo.list_orders(status=status, limit=limit, after=after)
        return present_order_page(orders, limit)

    def update_order_status(self, admin_id: int, order_id: int, status: str) -> Order:
        return OrderStatusService(self.session).update_as_admin(admin_id, order_id, status)

    def list_products(self, status: Optional[str] = None) -> List[Product]:
        return self.product_repo.list_admin(status)

    def update_product_flags(self, admin_id: int, product_id: int, flags: Dict[str, bool]) -> Product:
        product = self.product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", str(product_id))
        for key in ("is_active", "is_featured"):
            if key in flags:
                setattr(product, key, flags[key])
        with self.product_repo.translate_errors("UPDATE"):
            self.session.commit()
        logger.info(f"Admin {admin_id} set {flags} on product {product_id}")
        return product

    def verify_shop(self, admin_id: int, shop_id: int) -> Shop:
        shop = self.shop_repo.get_by_id(shop_id)
        if shop is None:
            raise NotFoundError("Shop", str(shop_id))
        shop.is_verified = True
        with self.shop_repo.translate_errors("UPDATE"):
            self.session.commit()
        logger.info(f"Admin {admin_id} verified shop {shop_id}")
        return shop
