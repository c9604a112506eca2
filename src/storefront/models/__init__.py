# Re-export all models from a single entry point so the rest of the app
# can import cleanly:
#   from storefront.models import User, Product, Order
#
# Importing all models here also ensures they are registered with
# Base.metadata before any call to Base.metadata.create_all().

from storefront.models.cart import CartItem, WishlistItem
from storefront.models.catalog import Brand, Category, Product, Shop
from storefront.models.order import Address, Order, OrderItem
from storefront.models.user import User

__all__ = [
    "User",
    "Category",
    "Brand",
    "Shop",
    "Product",
    "CartItem",
    "WishlistItem",
    "Address",
    "Order",
    "OrderItem",
]
