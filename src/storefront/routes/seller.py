import logging

from flask import Blueprint, g, request

from storefront.db import get_session
from storefront.routes.schemas import OrderStatusSchema, ProductSchema, ShopSchema
from storefront.routes.utils import (
    get_app_config, get_json_body, parse_int, require_role, success_response
)
from storefront.schemas.catalog_schemas import ProductResponse, ShopResponse
from storefront.services import SellerService
from storefront.services.order_reader import present_order

logger = logging.getLogger(__name__)

seller_bp = Blueprint("seller", __name__)

_shop_schema = ShopSchema()
_product_schema = ProductSchema()
_product_update_schema = ProductSchema(partial=True)
_status_schema = OrderStatusSchema()


@seller_bp.route("/shop", methods=["POST"])
@require_role("seller")
def register_shop():
    body = _shop_schema.load(get_json_body())
    shop = SellerService(get_session()).register_shop(g.user_id, body)
    return success_response(ShopResponse.model_validate(shop).model_dump(mode="json"), "Shop registered.", 201)


@seller_bp.route("/shop", methods=["GET"])
@require_role("seller")
def get_shop():
    shop = SellerService(get_session()).get_shop(g.user_id)
    return success_response(ShopResponse.model_validate(shop).model_dump(mode="json"))


@seller_bp.route("/dashboard", methods=["GET"])
@require_role("seller")
def dashboard():
    return success_response(SellerService(get_session()).dashboard(g.user_id))


@seller_bp.route("/products", methods=["GET"])
@require_role("seller")
def list_products():
    products = SellerService(get_session()).list_products(g.user_id)
    return success_response([ProductResponse.model_validate(p).model_dump(mode="json") for p in products])


@seller_bp.route("/products", methods=["POST"])
@require_role("seller")
def create_product():
    body = _product_schema.load(get_json_body())
    product = SellerService(get_session()).create_product(g.user_id, body)
    return success_response(ProductResponse.model_validate(product).model_dump(mode="json"), "Product created.", 201)


@seller_bp.route("/products/<int:product_id>", methods=["PATCH"])
@require_role("seller")
def update_product(product_id: int):
    body = _product_update_schema.load(get_json_body())
    product = SellerService(get_session()).update_product(g.user_id, product_id, body)
    return success_response(ProductResponse.model_validate(product).model_dump(mode="json"), "Product updated.")


@seller_bp.route("/orders", methods=["GET"])
@require_role("seller")
def list_orders():
    api = get_app_config().api
    limit = parse_int(request.args.get("limit"), default=api.default_page_size, min_val=1, max_val=api.max_page_size, field_name="limit")
    after = parse_int(request.args.get("after"), default=None, min_val=1, field_name="after")
    status = request.args.get("status") or None
    page = SellerService(get_session()).list_orders(g.user_id, status=status, limit=limit, after=after)
    return success_response(page.model_dump(mode="json"))


@seller_bp.route("/orders/<int:order_id>/status", methods=["POST"])
@require_role("seller")
def update_order_status(order_id: int):
    body = _status_schema.load(get_json_body())
    order = SellerService(get_session()).update_order_status(g.user_id, order_id, body["status"])
    return success_response(present_order(order).model_dump(mode="json"), "Order status updated.")
