from typing import Optional
import logging

from sqlalchemy.orm import Session

from storefront.core.exceptions import NotFoundError
from storefront.domain.order import OrderStatus, can_transition
from storefront.models import Order
from storefront.repositories import OrderRepository
from storefront.schemas.common_schemas import PaginationResponse
from storefront.schemas.order_schemas import (
    OrderDetailsResponse, OrderItemResponse, OrderListResponse,
    OrderSummaryResponse, ShippingAddressResponse,
)

logger = logging.getLogger(__name__)


def present_order(order: Order) -> OrderDetailsResponse:
    """Order header, line items and the delivery address snapshot"""
    return OrderDetailsResponse(
        id=order.id,
        user_id=order.user_id,
        status=order.status,
        payment_method=order.payment_method,
        subtotal_paise=order.subtotal_paise,
        shipping_paise=order.shipping_paise,
        total_paise=order.total_paise,
        currency=order.currency,
        created_at=order.created_at,
        updated_at=order.updated_at,
        can_be_cancelled=can_transition(OrderStatus(order.status), OrderStatus.CANCELLED),
        shipping_address=ShippingAddressResponse(**order.shipping_address),
        items=[
            OrderItemResponse(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                price_paise=item.price_paise,
                subtotal_paise=item.subtotal_paise,
                size=item.size or None,
                color=item.color or None,
            )
            for item in order.items
        ],
    )


def present_order_page(orders, limit: int) -> OrderListResponse:
    """One page of summaries; orders may hold one row past limit to mark a next page"""
    has_more = len(orders) > limit
    items = [
        OrderSummaryResponse(
            id=o.id,
            status=o.status,
            payment_method=o.payment_method,
            total_paise=o.total_paise,
            currency=o.currency,
            item_count=len(o.items),
            created_at=o.created_at,
        )
        for o in orders[:limit]
    ]
    return OrderListResponse(
        items=items,
        pagination=PaginationResponse(
            limit=limit,
            count=len(items),
            has_more=has_more,
            next_cursor=items[-1].id if has_more else None,
        ),
    )


class OrderReader:
    """Read side of the order workflow. Never writes."""

    def __init__(self, session: Session):
        self.order_repo = OrderRepository(session)

    def get_order(self, user_id: int, order_id: int) -> OrderDetailsResponse:
        """
        The caller's order with items and delivery address.

        A missing order and another user's order produce the same NotFound,
        so the response never reveals whether a foreign order id exists.
        """
        order = self.order_repo.get_for_user(user_id, order_id)
        if order is None:
            logger.info(f"Order {order_id} not found for user {user_id}")
            raise NotFoundError("Order", str(order_id))
        return present_order(order)

    def list_orders(self, user_id: int, limit: int = 20, after: Optional[int] = None) -> OrderListResponse:
        """The caller's orders, newest first"""
        orders = self.order_repo.list_orders(user_id=user_id, limit=limit, after=after)
        return present_order_page(orders, limit)
