import logging

from flask import Blueprint, request

from storefront.core.exceptions import ValidationError
from storefront.db import get_session
from storefront.repositories.product_repository import SORT_ORDERS
from storefront.routes.utils import get_app_config, parse_bool, parse_int, success_response
from storefront.services import CatalogService

logger = logging.getLogger(__name__)

products_bp = Blueprint("products", __name__)


@products_bp.route("", methods=["GET"])
def list_products():
    """Search active products with filters, sorting and offset pagination."""
    api = get_app_config().api
    limit = parse_int(request.args.get("limit"), default=api.default_page_size, min_val=1, max_val=api.max_page_size, field_name="limit")
    offset = parse_int(request.args.get("offset"), default=0, min_val=0, field_name="offset")

    search_query = request.args.get("q", "").strip()
    if search_query and len(search_query) < 2:
        raise ValidationError("Search query must be at least 2 characters.", [{"field": "q", "message": "too short"}])
    if len(search_query) > 100:
        raise ValidationError("Search query cannot exceed 100 characters.", [{"field": "q", "message": "too long"}])

    min_price = parse_int(request.args.get("min_price"), default=None, min_val=0, field_name="min_price")
    max_price = parse_int(request.args.get("max_price"), default=None, min_val=0, field_name="max_price")
    if min_price is not None and max_price is not None and min_price > max_price:
        raise ValidationError("min_price cannot be greater than max_price.", [{"field": "min_price", "message": "greater than max_price"}])

    sort = request.args.get("sort", "newest")
    if sort not in SORT_ORDERS:
        raise ValidationError(f"sort must be one of: {', '.join(SORT_ORDERS)}", [{"field": "sort", "message": "unknown sort"}])

    filters = {
        "query": search_query or None,
        "category": request.args.get("category") or None,
        "brand": request.args.get("brand") or None,
        "min_price": min_price,
        "max_price": max_price,
        "size": request.args.get("size") or None,
        "color": request.args.get("color") or None,
        "featured": parse_bool(request.args.get("featured"), default=None),
        "sort": sort,
        "limit": limit,
        "offset": offset,
    }
    products = CatalogService(get_session()).search_products(filters)
    return success_response({
        "items": [p.model_dump(mode="json") for p in products],
        "pagination": {
            "limit": limit,
            "offset": offset,
            "count": len(products),
            "has_more": len(products) == limit,
        },
    })


@products_bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id: int):
    product = CatalogService(get_session()).get_product(product_id)
    return success_response(product.model_dump(mode="json"))
