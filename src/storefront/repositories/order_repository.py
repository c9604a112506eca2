from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from storefront.domain.cart import CartLine
from storefront.models import Order, OrderItem
from storefront.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class OrderRepository(BaseRepository[Order]):
    """Repository for orders and their line items"""

    model = Order

    def find_by_idempotency_key(self, user_id: int, key: str) -> Optional[Order]:
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(Order).where(
                    Order.user_id == user_id, Order.idempotency_key == key
                )
            ).scalar_one_or_none()

    def add_order(self, order: Order) -> Order:
        """Insert the order header; flushes so order.id is assigned"""
        return self.add(order)

    def add_line_items(self, order: Order, lines: List[CartLine]) -> List[OrderItem]:
        """Insert one OrderItem per cart line, snapshotting name and unit price"""
        items = [
            OrderItem(
                order_id=order.id,
                product_id=line.product_id,
                product_name=line.product_name,
                shop_id=line.shop_id,
                quantity=line.quantity,
                price_paise=line.unit_price,
                subtotal_paise=line.subtotal,
                size=line.size,
                color=line.color,
            )
            for line in lines
        ]
        with self.translate_errors("INSERT"):
            self.session.add_all(items)
            self.session.flush()
        return items

    def get_for_user(self, user_id: int, order_id: int) -> Optional[Order]:
        """Order with items, only if it belongs to user_id"""
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(Order)
                .options(selectinload(Order.items))
                .where(Order.id == order_id, Order.user_id == user_id)
            ).scalar_one_or_none()

    def get_with_items(self, order_id: int) -> Optional[Order]:
        with self.translate_errors("SELECT"):
            return self.session.execute(
                select(Order)
                .options(selectinload(Order.items))
                .where(Order.id == order_id)
            ).scalar_one_or_none()

    def list_orders(
        self,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        shop_id: Optional[int] = None,
        limit: int = 20,
        after: Optional[int] = None,
    ) -> List[Order]:
        """
        Orders newest first with keyset pagination on id.

        Returns up to limit + 1 rows; the extra row only signals that another
        page exists and is dropped by present_order_page.

        shop_id restricts to orders containing at least one of that shop's
        products (the seller view).
        """
        stmt = select(Order).options(selectinload(Order.items))
        if user_id is not None:
            stmt = stmt.where(Order.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        if shop_id is not None:
            stmt = stmt.where(
                Order.id.in_(select(OrderItem.order_id).where(OrderItem.shop_id == shop_id))
            )
        if after is not None:
            stmt = stmt.where(Order.id < after)
        stmt = stmt.order_by(Order.id.desc()).limit(limit + 1)

        with self.translate_errors("SELECT"):
            return list(self.session.execute(stmt).scalars())

    def status_counts(self) -> Dict[str, int]:
        with self.translate_errors("SELECT"):
            rows = self.session.execute(
                select(Order.status, func.count()).group_by(Order.status)
            ).all()
        return {status: int(n) for status, n in rows}

    def revenue(self) -> int:
        """Sum of totals over orders that were not cancelled"""
        with self.translate_errors("SELECT"):
            total = self.session.execute(
                select(func.coalesce(func.sum(Order.total_paise), 0))
                .where(Order.status != "cancelled")
            ).scalar_one()
        return int(total)

    def shop_sales(self, shop_id: int) -> Dict[str, Any]:
        """Units sold and gross sales for one shop's line items, excluding cancelled orders"""
        with self.translate_errors("SELECT"):
            row = self.session.execute(
                select(
                    func.count(func.distinct(OrderItem.order_id)),
                    func.coalesce(func.sum(OrderItem.quantity), 0),
                    func.coalesce(func.sum(OrderItem.subtotal_paise), 0),
                )
                .join(Order, Order.id == OrderItem.order_id)
                .where(OrderItem.shop_id == shop_id, Order.status != "cancelled")
            ).one()
        return {
            "order_count": int(row[0]),
            "units_sold": int(row[1]),
            "gross_sales_paise": int(row[2]),
        }
