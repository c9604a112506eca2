from typing import Optional
import logging

from sqlalchemy.orm import Session

from storefront.core.exceptions import InvalidStatusTransition, NotFoundError, ValidationError
from storefront.domain.order import OrderStatus, can_transition
from storefront.models import Order
from storefront.repositories import OrderRepository, ShopRepository

logger = logging.getLogger(__name__)


class OrderStatusService:
    """
    Applies order status changes through the state machine.

    pending -> confirmed -> shipped -> delivered, and any non-terminal state
    -> cancelled. Each change is committed on its own.
    """

    def __init__(self, session: Session):
        self.session = session
        self.order_repo = OrderRepository(session)
        self.shop_repo = ShopRepository(session)

    def cancel_for_buyer(self, user_id: int, order_id: int) -> Order:
        order = self.order_repo.get_for_user(user_id, order_id)
        if order is None:
            raise NotFoundError("Order", str(order_id))
        return self._apply(order, OrderStatus.CANCELLED, actor=f"buyer {user_id}")

    def update_as_admin(self, admin_id: int, order_id: int, target: str) -> Order:
        order = self.order_repo.get_with_items(order_id)
        if order is None:
            raise NotFoundError("Order", str(order_id))
        return self._apply(order, self._parse(target), actor=f"admin {admin_id}")

    def update_as_seller(self, seller_id: int, order_id: int, target: str) -> Order:
        """Sellers may only move orders that contain their own shop's items"""
        shop = self.shop_repo.get_by_seller(seller_id)
        order = self.order_repo.get_with_items(order_id)
        if shop is None or order is None or not any(i.shop_id == shop.id for i in order.items):
            raise NotFoundError("Order", str(order_id))
        return self._apply(order, self._parse(target), actor=f"seller {seller_id}")

    @staticmethod
    def _parse(target: Optional[str]) -> OrderStatus:
        try:
            return OrderStatus(target)
        except ValueError:
            raise ValidationError(
                "Invalid order status",
                [{"field": "status", "message": f"Unknown status '{target}'"}],
            )

    def _apply(self, order: Order, target: OrderStatus, actor: str) -> Order:
        current = OrderStatus(order.status)
        if not can_transition(current, target):
            logger.warning(f"{actor} attempted {current.value} -> {target.value} on order {order.id}")
            raise InvalidStatusTransition(current.value, target.value)

        order.status = target.value
        with self.order_repo.translate_errors("UPDATE"):
            self.session.commit()
        logger.info(f"Order {order.id} moved {current.value} -> {target.value} by {actor}")
        return order
