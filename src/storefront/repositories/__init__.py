from storefront.repositories.address_repository import AddressRepository
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.shop_repository import ShopRepository
from storefront.repositories.user_repository import UserRepository
from storefront.repositories.wishlist_repository import WishlistRepository

__all__ = [
    "AddressRepository",
    "CartRepository",
    "OrderRepository",
    "ProductRepository",
    "ShopRepository",
    "UserRepository",
    "WishlistRepository",
]
