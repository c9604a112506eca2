import logging

from flask import Blueprint

from storefront.db import get_session
from storefront.routes.schemas import AddCartItemSchema, UpdateCartItemSchema
from storefront.routes.utils import get_app_config, get_current_user_id, get_json_body, success_response
from storefront.services import CartService

logger = logging.getLogger(__name__)

cart_bp = Blueprint("cart", __name__)

_add_schema = AddCartItemSchema()
_update_schema = UpdateCartItemSchema()


def _service() -> CartService:
    return CartService(get_session(), get_app_config().checkout)


@cart_bp.route("", methods=["GET"])
def get_cart():
    """Return the current user's cart with its pricing summary."""
    user_id = get_current_user_id()
    return success_response(_service().get_cart(user_id).model_dump(mode="json"))


@cart_bp.route("/items", methods=["POST"])
def add_item():
    user_id = get_current_user_id()
    body = _add_schema.load(get_json_body())
    service = _service()
    service.add_item(user_id, body["product_id"], body["quantity"], body["size"], body["color"])
    return success_response(service.get_cart(user_id).model_dump(mode="json"), "Item added to cart.", 201)


@cart_bp.route("/items/<int:cart_item_id>", methods=["PATCH"])
def update_item(cart_item_id: int):
    """Change a line's quantity; quantity 0 removes the line."""
    user_id = get_current_user_id()
    body = _update_schema.load(get_json_body())
    service = _service()
    item = service.update_quantity(user_id, cart_item_id, body["quantity"])
    message = "Cart item updated." if item is not None else "Item removed from cart."
    return success_response(service.get_cart(user_id).model_dump(mode="json"), message)


@cart_bp.route("/items/<int:cart_item_id>", methods=["DELETE"])
def remove_item(cart_item_id: int):
    user_id = get_current_user_id()
    service = _service()
    service.remove_item(user_id, cart_item_id)
    return success_response(service.get_cart(user_id).model_dump(mode="json"), "Item removed from cart.")


@cart_bp.route("/items/<int:cart_item_id>/move-to-wishlist", methods=["POST"])
def move_to_wishlist(cart_item_id: int):
    user_id = get_current_user_id()
    service = _service()
    wished = service.move_to_wishlist(user_id, cart_item_id)
    return success_response(
        {"wishlist_item_id": wished.id, "cart": service.get_cart(user_id).model_dump(mode="json")},
        "Moved to wishlist.",
    )
