from flask import Blueprint

from storefront.db import get_session
from storefront.routes.schemas import WishlistToggleSchema
from storefront.routes.utils import get_current_user_id, get_json_body, success_response
from storefront.services import WishlistService

wishlist_bp = Blueprint("wishlist", __name__)

_toggle_schema = WishlistToggleSchema()


@wishlist_bp.route("", methods=["GET"])
def list_wishlist():
    user_id = get_current_user_id()
    items = WishlistService(get_session()).list_items(user_id)
    return success_response([i.model_dump(mode="json") for i in items])


@wishlist_bp.route("/toggle", methods=["POST"])
def toggle():
    """Add the product to the wishlist, or remove it if it is already there."""
    user_id = get_current_user_id()
    body = _toggle_schema.load(get_json_body())
    action = WishlistService(get_session()).toggle(user_id, body["product_id"])
    return success_response({"action": action, "product_id": body["product_id"]})
