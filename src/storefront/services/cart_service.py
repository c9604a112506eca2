from typing import Optional
import logging

from sqlalchemy.orm import Session

from storefront.core.config import CheckoutConfig
from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.models import CartItem, WishlistItem
from storefront.repositories import CartRepository, ProductRepository, WishlistRepository
from storefront.schemas.cart_schemas import CartLineResponse, CartResponse, CartSummaryResponse
from storefront.services.pricing import PricingCalculator

logger = logging.getLogger(__name__)


class CartService:
    """
    Shopping cart business logic service

    Business Rules:
    - Only active products can be added
    - A chosen size/color must be one the product offers
    - Adding the same product/size/color again merges into one row
    - A line's quantity cannot exceed the product's stock or max_quantity_per_item
    - Setting quantity to 0 removes the line
    """

    max_quantity_per_item = 10

    def __init__(self, session: Session, checkout_config: CheckoutConfig):
        self.session = session
        self.config = checkout_config
        self.cart_repo = CartRepository(session)
        self.product_repo = ProductRepository(session)
        self.wishlist_repo = WishlistRepository(session)
        self.pricing = PricingCalculator.from_config(checkout_config)

    def get_cart(self, user_id: int) -> CartResponse:
        cart = self.cart_repo.get_snapshot(user_id)
        breakdown = self.pricing.calculate(cart.lines)
        return CartResponse(
            user_id=user_id,
            item_count=len(cart.lines),
            total_quantity=cart.total_quantity,
            is_empty=cart.is_empty,
            currency=self.config.currency,
            items=[CartLineResponse(**line.to_dict()) for line in cart.lines],
            summary=CartSummaryResponse(
                **breakdown.to_dict(),
                amount_to_free_shipping_paise=(
                    0 if cart.is_empty else self.pricing.amount_to_free_shipping(breakdown.subtotal)
                ),
            ),
        )

    def add_item(
        self,
        user_id: int,
        product_id: int,
        quantity: int,
        size: Optional[str] = None,
        color: Optional[str] = None,
    ) -> CartItem:
        logger.info(f"Adding product {product_id} x{quantity} to cart of user {user_id}")

        product = self.product_repo.get_by_id(product_id)
        if product is None or not product.is_active:
            raise NotFoundError("Product", str(product_id))

        size = size or ""
        color = color or ""
        field_errors = []
        if size and size not in (product.sizes or []):
            field_errors.append({"field": "size", "message": f"Size '{size}' is not available"})
        if color and color not in (product.colors or []):
            field_errors.append({"field": "color", "message": f"Color '{color}' is not available"})
        if field_errors:
            raise ValidationError("Invalid product options", field_errors)

        existing = self.cart_repo.find_variant(user_id, product_id, size, color)
        new_quantity = quantity + (existing.quantity if existing else 0)
        self._check_quantity(new_quantity, product.stock_quantity)

        item = self.cart_repo.add_item(user_id, product_id, quantity, size, color)
        self.session.commit()
        logger.info(f"Cart item {item.id} for user {user_id} now has quantity {item.quantity}")
        return item

    def update_quantity(self, user_id: int, cart_item_id: int, quantity: int) -> Optional[CartItem]:
        """Set a line's quantity; 0 removes it and returns None"""
        item = self._get_owned_item(user_id, cart_item_id)

        if quantity == 0:
            self.remove_item(user_id, cart_item_id)
            return None

        product = self.product_repo.get_by_id(item.product_id)
        self._check_quantity(quantity, product.stock_quantity if product else 0)

        item.quantity = quantity
        with self.cart_repo.translate_errors("UPDATE"):
            self.session.commit()
        return item

    def remove_item(self, user_id: int, cart_item_id: int) -> None:
        item = self._get_owned_item(user_id, cart_item_id)
        self.cart_repo.delete(item)
        self.session.commit()
        logger.info(f"Removed cart item {cart_item_id} for user {user_id}")

    def move_to_wishlist(self, user_id: int, cart_item_id: int) -> WishlistItem:
        """Save the line's product to the wishlist and drop it from the cart, in one transaction"""
        item = self._get_owned_item(user_id, cart_item_id)

        wished = self.wishlist_repo.find(user_id, item.product_id)
        if wished is None:
            wished = self.wishlist_repo.add(WishlistItem(user_id=user_id, product_id=item.product_id))
        self.cart_repo.delete(item)
        self.session.commit()

        logger.info(f"Moved cart item {cart_item_id} to wishlist for user {user_id}")
        return wished

    def _get_owned_item(self, user_id: int, cart_item_id: int) -> CartItem:
        item = self.cart_repo.get_item(user_id, cart_item_id)
        if item is None:
            raise NotFoundError("Cart item", str(cart_item_id))
        return item

    def _check_quantity(self, quantity: int, stock: int) -> None:
        if quantity > self.max_quantity_per_item:
            raise ValidationError(
                f"Cannot add more than {self.max_quantity_per_item} of the same item",
                [{"field": "quantity", "message": f"Maximum is {self.max_quantity_per_item}"}],
            )
        if quantity > stock:
            raise ValidationError(
                "Insufficient stock for requested quantity",
                [{"field": "quantity", "message": f"Only {stock} left in stock"}],
            )
