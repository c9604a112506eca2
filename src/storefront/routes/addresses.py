from flask import Blueprint

from storefront.db import get_session
from storefront.routes.schemas import AddressSchema
from storefront.routes.utils import get_current_user_id, get_json_body, success_response
from storefront.schemas.catalog_schemas import AddressResponse
from storefront.services import AddressService

addresses_bp = Blueprint("addresses", __name__)

_address_schema = AddressSchema()
_address_update_schema = AddressSchema(partial=True)


def _dump(address) -> dict:
    return AddressResponse.model_validate(address).model_dump(mode="json")


@addresses_bp.route("", methods=["GET"])
def list_addresses():
    """The caller's addresses, default first."""
    user_id = get_current_user_id()
    return success_response([_dump(a) for a in AddressService(get_session()).list_addresses(user_id)])


@addresses_bp.route("", methods=["POST"])
def create_address():
    user_id = get_current_user_id()
    body = _address_schema.load(get_json_body())
    address = AddressService(get_session()).create(user_id, body)
    return success_response(_dump(address), "Address added.", 201)


@addresses_bp.route("/<int:address_id>", methods=["PUT"])
def update_address(address_id: int):
    user_id = get_current_user_id()
    body = _address_update_schema.load(get_json_body())
    address = AddressService(get_session()).update(user_id, address_id, body)
    return success_response(_dump(address), "Address updated.")


@addresses_bp.route("/<int:address_id>", methods=["DELETE"])
def delete_address(address_id: int):
    user_id = get_current_user_id()
    AddressService(get_session()).delete(user_id, address_id)
    return success_response({"address_id": address_id}, "Address deleted.")


@addresses_bp.route("/<int:address_id>/default", methods=["POST"])
def set_default_address(address_id: int):
    user_id = get_current_user_id()
    address = AddressService(get_session()).set_default(user_id, address_id)
    return success_response(_dump(address), "Default address updated.")
