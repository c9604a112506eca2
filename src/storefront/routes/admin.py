import logging

from flask import Blueprint, g, request

from storefront.core.exceptions import ValidationError
from storefront.db import get_session
from storefront.domain.order import OrderStatus
from storefront.routes.schemas import OrderStatusSchema, ProductFlagsSchema
from storefront.routes.utils import (
    get_app_config, get_json_body, parse_int, require_role, success_response
)
from storefront.schemas.catalog_schemas import ProductResponse, ShopResponse
from storefront.services import AdminService
from storefront.services.order_reader import present_order

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)

_status_schema = OrderStatusSchema()
_flags_schema = ProductFlagsSchema()

PRODUCT_FILTERS = ("all", "active", "inactive", "featured")


@admin_bp.route("/dashboard", methods=["GET"])
@require_role("admin")
def dashboard():
    data = AdminService(get_session()).dashboard()
    data["recent_orders"] = [o.model_dump(mode="json") for o in data["recent_orders"]]
    return success_response(data)


@admin_bp.route("/orders", methods=["GET"])
@require_role("admin")
def list_orders():
    """All orders, newest first; ?status= filters, 'all' or absent means no filter."""
    api = get_app_config().api
    limit = parse_int(request.args.get("limit"), default=api.default_page_size, min_val=1, max_val=api.max_page_size, field_name="limit")
    after = parse_int(request.args.get("after"), default=None, min_val=1, field_name="after")

    status = request.args.get("status") or "all"
    if status != "all" and status not in {s.value for s in OrderStatus}:
        raise ValidationError(f"Unknown status '{status}'", [{"field": "status", "message": "unknown status"}])

    page = AdminService(get_session()).list_orders(
        status=None if status == "all" else status, limit=limit, after=after
    )
    return success_response(page.model_dump(mode="json"))


@admin_bp.route("/orders/<int:order_id>/status", methods=["POST"])
@require_role("admin")
def update_order_status(order_id: int):
    body = _status_schema.load(get_json_body())
    order = AdminService(get_session()).update_order_status(g.user_id, order_id, body["status"])
    return success_response(present_order(order).model_dump(mode="json"), "Order status updated.")


@admin_bp.route("/products", methods=["GET"])
@require_role("admin")
def list_products():
    status = request.args.get("status") or "all"
    if status not in PRODUCT_FILTERS:
        raise ValidationError(f"status must be one of: {', '.join(PRODUCT_FILTERS)}", [{"field": "status", "message": "unknown filter"}])
    products = AdminService(get_session()).list_products(None if status == "all" else status)
    return success_response([ProductResponse.model_validate(p).model_dump(mode="json") for p in products])


@admin_bp.route("/products/<int:product_id>", methods=["PATCH"])
@require_role("admin")
def update_product(product_id: int):
    flags = _flags_schema.load(get_json_body())
    product = AdminService(get_session()).update_product_flags(g.user_id, product_id, flags)
    return success_response(ProductResponse.model_validate(product).model_dump(mode="json"), "Product updated.")


@admin_bp.route("/shops/<int:shop_id>/verify", methods=["POST"])
@require_role("admin")
def verify_shop(shop_id: int):
    shop = AdminService(get_session()).verify_shop(g.user_id, shop_id)
    return success_response(ShopResponse.model_validate(shop).model_dump(mode="json"), "Shop verified.")
