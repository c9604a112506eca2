import logging

from flask import Blueprint, request

from storefront.core.exceptions import ValidationError
from storefront.db import get_session
from storefront.routes.utils import get_app_config, parse_float, parse_int, success_response
from storefront.services import CatalogService

logger = logging.getLogger(__name__)

shops_bp = Blueprint("shops", __name__)


@shops_bp.route("/nearby", methods=["GET"])
def nearby_shops():
    """
    Shops near a point, nearest first.

    latitude and longitude are required; radius (km) and limit fall back to
    the configured defaults.
    """
    shops_config = get_app_config().shops
    if request.args.get("latitude") is None or request.args.get("longitude") is None:
        raise ValidationError(
            "Latitude and longitude are required",
            [{"field": f, "message": "required"} for f in ("latitude", "longitude") if request.args.get(f) is None],
        )

    latitude = parse_float(request.args.get("latitude"), min_val=-90, max_val=90, field_name="latitude")
    longitude = parse_float(request.args.get("longitude"), min_val=-180, max_val=180, field_name="longitude")
    radius = parse_float(
        request.args.get("radius"), default=shops_config.default_radius_km,
        min_val=0.1, max_val=shops_config.max_radius_km, field_name="radius",
    )
    limit = parse_int(
        request.args.get("limit"), default=shops_config.default_limit,
        min_val=1, max_val=shops_config.max_limit, field_name="limit",
    )

    shops = CatalogService(get_session()).nearby_shops(latitude, longitude, radius, limit)
    return success_response({"shops": [s.model_dump(mode="json") for s in shops]})


@shops_bp.route("/<slug>", methods=["GET"])
def get_shop(slug: str):
    return success_response(CatalogService(get_session()).get_shop(slug))
