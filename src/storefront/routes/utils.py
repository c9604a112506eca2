from datetime import datetime, timezone
from functools import wraps
from typing import Optional

from flask import current_app, g, jsonify, request

from storefront.core.config import Config
from storefront.core.exceptions import ForbiddenError, UnauthorizedError, ValidationError
from storefront.db import get_session
from storefront.repositories import UserRepository


def success_response(data, message: Optional[str] = None, status: int = 200):
    """Consistent success response envelope."""
    response = {
        "success": True,
        "data": data,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if message:
        response["message"] = message
    return jsonify(response), status


def get_app_config() -> Config:
    return current_app.config["STOREFRONT"]


def parse_int(
    v,
    default=None,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
    field_name: str = "value",
) -> Optional[int]:
    """Parse an integer query parameter with optional range validation."""
    if v is None or v == "":
        return default
    try:
        result = int(v)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid {field_name}: must be a valid integer",
            [{"field": field_name, "message": "must be a valid integer"}],
        )
    if min_val is not None and result < min_val:
        raise ValidationError(f"{field_name} must be at least {min_val}", [{"field": field_name, "message": f"minimum is {min_val}"}])
    if max_val is not None and result > max_val:
        raise ValidationError(f"{field_name} cannot exceed {max_val}", [{"field": field_name, "message": f"maximum is {max_val}"}])
    return result


def parse_float(v, default=None, min_val: Optional[float] = None, max_val: Optional[float] = None, field_name: str = "value") -> Optional[float]:
    if v is None or v == "":
        return default
    try:
        result = float(v)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid {field_name}: must be a number",
            [{"field": field_name, "message": "must be a number"}],
        )
    if (min_val is not None and result < min_val) or (max_val is not None and result > max_val):
        raise ValidationError(
            f"{field_name} must be between {min_val} and {max_val}",
            [{"field": field_name, "message": f"must be between {min_val} and {max_val}"}],
        )
    return result


def parse_bool(v, default: Optional[bool] = False) -> Optional[bool]:
    """Parse a boolean value from a query string."""
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    return str(v).lower() in ("1", "true", "t", "yes", "y", "on")


def get_current_user_id() -> int:
    """
    Extract and validate the caller's id from the X-User-Id header.

    The header is set by the authentication gateway; the id must belong to a
    known user. The role is cached on flask.g for require_role.
    """
    if "user_id" in g:
        return g.user_id

    uid = request.headers.get("X-User-Id")
    if not uid:
        raise UnauthorizedError("Missing X-User-Id header.")
    try:
        user_id = int(uid)
    except ValueError:
        raise UnauthorizedError("Invalid X-User-Id header: must be a positive integer.")
    if user_id <= 0:
        raise UnauthorizedError("Invalid X-User-Id header: must be a positive integer.")

    role = UserRepository(get_session()).get_role(user_id)
    if role is None:
        raise UnauthorizedError("Unknown user.")

    g.user_id = user_id
    g.user_role = role
    return user_id


def require_role(*roles: str):
    """Route decorator: the caller must be authenticated with one of roles."""
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            get_current_user_id()
            if g.user_role not in roles:
                raise ForbiddenError(f"This action requires the {' or '.join(roles)} role")
            return f(*args, **kwargs)
        return wrapper
    return decorator


def get_json_body() -> dict:
    """Request JSON body; an absent or non-object body is treated as {}."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
