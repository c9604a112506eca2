import logging

from flask import Blueprint, request

from storefront.db import get_session
from storefront.routes.schemas import CheckoutSchema
from storefront.routes.utils import (
    get_app_config, get_current_user_id, get_json_body, parse_int, success_response
)
from storefront.schemas.order_schemas import PlaceOrderResponse
from storefront.services import OrderReader, OrderStatusService, OrderWriter
from storefront.services.order_reader import present_order

logger = logging.getLogger(__name__)

orders_bp = Blueprint("orders", __name__)

_checkout_schema = CheckoutSchema()


@orders_bp.route("/checkout", methods=["POST"])
def checkout():
    """
    Place an order from the caller's cart.

    Body: address_id, payment_method (card | upi | cash_on_delivery) and an
    optional idempotency_key (or Idempotency-Key header). Repeating a request
    with the same key returns the original order with replayed=true.
    """
    user_id = get_current_user_id()
    body = _checkout_schema.load(get_json_body())
    idempotency_key = body["idempotency_key"] or request.headers.get("Idempotency-Key") or None

    config = get_app_config()
    placed = OrderWriter(get_session(), config.checkout).place_order(
        user_id,
        body["address_id"],
        body["payment_method"],
        idempotency_key=idempotency_key,
    )

    order = placed.order
    data = PlaceOrderResponse(
        order_id=order.id,
        status=order.status,
        subtotal_paise=order.subtotal_paise,
        shipping_paise=order.shipping_paise,
        total_paise=order.total_paise,
        currency=order.currency,
        replayed=placed.replayed,
    ).model_dump(mode="json")

    if placed.replayed:
        return success_response(data, "Order already placed.", 200)
    return success_response(data, "Order placed successfully.", 201)


@orders_bp.route("", methods=["GET"])
def list_orders():
    """List the current user's orders, most recent first."""
    user_id = get_current_user_id()
    api = get_app_config().api
    limit = parse_int(request.args.get("limit"), default=api.default_page_size, min_val=1, max_val=api.max_page_size, field_name="limit")
    after = parse_int(request.args.get("after"), default=None, min_val=1, field_name="after")

    page = OrderReader(get_session()).list_orders(user_id, limit=limit, after=after)
    return success_response(page.model_dump(mode="json"))


@orders_bp.route("/<int:order_id>", methods=["GET"])
def get_order(order_id: int):
    """Get a single order with its line items and delivery address."""
    user_id = get_current_user_id()
    details = OrderReader(get_session()).get_order(user_id, order_id)
    return success_response(details.model_dump(mode="json"))


@orders_bp.route("/<int:order_id>/cancel", methods=["POST"])
def cancel_order(order_id: int):
    user_id = get_current_user_id()
    order = OrderStatusService(get_session()).cancel_for_buyer(user_id, order_id)
    return success_response(present_order(order).model_dump(mode="json"), "Order cancelled.")
