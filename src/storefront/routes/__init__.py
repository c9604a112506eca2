from storefront.routes.addresses import addresses_bp
from storefront.routes.admin import admin_bp
from storefront.routes.cart import cart_bp
from storefront.routes.orders import orders_bp
from storefront.routes.products import products_bp
from storefront.routes.seller import seller_bp
from storefront.routes.shops import shops_bp
from storefront.routes.wishlist import wishlist_bp

__all__ = [
    "addresses_bp",
    "admin_bp",
    "cart_bp",
    "orders_bp",
    "products_bp",
    "seller_bp",
    "shops_bp",
    "wishlist_bp",
]
