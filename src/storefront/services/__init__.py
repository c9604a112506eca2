from storefront.services.address_service import AddressService
from storefront.services.admin_service import AdminService
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.checkout_selection import AddressPaymentSelector, CheckoutSelection
from storefront.services.order_reader import OrderReader
from storefront.services.order_status import OrderStatusService
from storefront.services.order_writer import OrderWriter, PlacedOrder
from storefront.services.pricing import PriceBreakdown, PricingCalculator
from storefront.services.seller_service import SellerService
from storefront.services.wishlist_service import WishlistService

__all__ = [
    "AddressPaymentSelector",
    "AddressService",
    "AdminService",
    "CartService",
    "CatalogService",
    "CheckoutSelection",
    "OrderReader",
    "OrderStatusService",
    "OrderWriter",
    "PlacedOrder",
    "PriceBreakdown",
    "PricingCalculator",
    "SellerService",
    "WishlistService",
]
