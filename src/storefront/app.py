import logging
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from storefront import db
from storefront.core.config import Config, get_config
from storefront.core.exceptions import BaseAPIException
from storefront.routes import (
    addresses_bp, admin_bp, cart_bp, orders_bp, products_bp, seller_bp, shops_bp, wishlist_bp
)

logger = logging.getLogger(__name__)


def _error(code: str, message: str, status: int, details: Optional[dict] = None):
    return jsonify({
        "success": False,
        "error": {"code": code, "message": message, "details": details or {}},
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }), status


def create_app(config: Optional[Config] = None) -> Flask:
    """
    Application factory.

    Tests pass their own Config (usually in-memory SQLite); everything else
    reads the environment through get_config().
    """
    config = config or get_config()
    config.validate()

    logging.basicConfig(
        level=getattr(logging, config.app.log_level.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    app = Flask(__name__)
    app.config["STOREFRONT"] = config
    app.json.sort_keys = False

    db.init_app(app, db.create_db_engine(config.database))

    # ------------------------------------------------------------------ #
    # Blueprints, each domain registered under /api/<version>/            #
    # ------------------------------------------------------------------ #
    prefix = f"/api/{config.api.version}"
    app.register_blueprint(orders_bp,    url_prefix=f"{prefix}/orders")
    app.register_blueprint(cart_bp,      url_prefix=f"{prefix}/cart")
    app.register_blueprint(wishlist_bp,  url_prefix=f"{prefix}/wishlist")
    app.register_blueprint(addresses_bp, url_prefix=f"{prefix}/addresses")
    app.register_blueprint(products_bp,  url_prefix=f"{prefix}/products")
    app.register_blueprint(shops_bp,     url_prefix=f"{prefix}/shops")
    app.register_blueprint(seller_bp,    url_prefix=f"{prefix}/seller")
    app.register_blueprint(admin_bp,     url_prefix=f"{prefix}/admin")

    # ------------------------------------------------------------------ #
    # Error handlers, consistent JSON error envelope                      #
    # ------------------------------------------------------------------ #
    @app.errorhandler(BaseAPIException)
    def api_error(e: BaseAPIException):
        if e.status_code >= 500:
            logger.error(f"{e.error_code}: {e.internal_message}")
        else:
            logger.info(f"{e.error_code}: {e.message}")
        body = e.to_dict()
        body["timestamp"] = datetime.now(timezone.utc).isoformat()
        return jsonify(body), e.status_code

    @app.errorhandler(SchemaValidationError)
    def schema_error(e: SchemaValidationError):
        return _error("VALIDATION_ERROR", "Validation failed", 400, {"field_errors": e.messages})

    @app.errorhandler(SQLAlchemyError)
    def db_error(e):
        logger.error(f"Unhandled database error: {e}")
        return _error("DATABASE_ERROR", "A database error occurred.", 500)

    @app.errorhandler(400)
    def bad_request(e):
        return _error("BAD_REQUEST", str(e.description), 400)

    @app.errorhandler(404)
    def not_found(e):
        return _error("NOT_FOUND", str(e.description), 404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return _error("METHOD_NOT_ALLOWED", str(e.description), 405)

    @app.errorhandler(500)
    def internal_error(e):
        return _error("INTERNAL_ERROR", "An internal server error occurred.", 500)

    # ------------------------------------------------------------------ #
    # Health check                                                         #
    # ------------------------------------------------------------------ #
    @app.get("/health")
    def health():
        """Liveness + readiness probe. Returns 503 if DB is unreachable."""
        try:
            with db.get_engine().connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error(f"Health check failed: {exc}")
            return jsonify({"status": "error", "database": "unreachable"}), 503
        return jsonify({
            "status": "ok",
            "database": "reachable",
            "version": config.api.version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }), 200

    logger.info(f"{config.api.title} ready ({config.app.environment})")
    return app


if __name__ == "__main__":
    settings = get_config()
    application = create_app(settings)
    application.run(debug=settings.app.debug, host=settings.app.host, port=settings.app.port)
