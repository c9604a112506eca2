from dataclasses import dataclass
from typing import Any, Dict, Iterable

from storefront.core.config import CheckoutConfig


@dataclass(frozen=True)
class PriceBreakdown:
    """Totals for a cart, all in paise"""
    subtotal: int
    shipping: int
    discount: int  # savings against original prices, already reflected in subtotal
    total: int

    @property
    def free_shipping(self) -> bool:
        return self.shipping == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subtotal_paise": self.subtotal,
            "shipping_paise": self.shipping,
            "discount_paise": self.discount,
            "total_paise": self.total,
            "free_shipping": self.free_shipping,
        }


class PricingCalculator:
    """
    Pure pricing rules for a cart.

    Lines are any objects with unit_price and quantity attributes (and
    optionally original_price). No I/O, so the same lines always price the
    same way.

    Rules:
    - subtotal is the sum of unit_price * quantity
    - shipping is free when subtotal is strictly above free_shipping_threshold,
      otherwise shipping_fee; an empty cart ships nothing and pays nothing
    - discount is what the buyer saves against original_price; informational,
      never subtracted again
    - total = subtotal + shipping
    """

    def __init__(self, free_shipping_threshold: int, shipping_fee: int):
        if free_shipping_threshold < 0 or shipping_fee < 0:
            raise ValueError("Threshold and fee must be non-negative")
        self.free_shipping_threshold = free_shipping_threshold
        self.shipping_fee = shipping_fee

    @classmethod
    def from_config(cls, checkout: CheckoutConfig) -> "PricingCalculator":
        return cls(checkout.free_shipping_threshold, checkout.shipping_fee)

    def calculate(self, lines: Iterable[Any]) -> PriceBreakdown:
        subtotal = 0
        discount = 0
        has_lines = False

        for line in lines:
            if line.unit_price < 0 or line.quantity <= 0:
                raise ValueError(
                    f"Invalid cart line: unit_price={line.unit_price}, quantity={line.quantity}"
                )
            has_lines = True
            subtotal += line.unit_price * line.quantity

            original = getattr(line, "original_price", None)
            if original is not None and original > line.unit_price:
                discount += (original - line.unit_price) * line.quantity

        shipping = self.shipping_for(subtotal) if has_lines else 0
        return PriceBreakdown(
            subtotal=subtotal,
            shipping=shipping,
            discount=discount,
            total=subtotal + shipping,
        )

    def shipping_for(self, subtotal: int) -> int:
        if subtotal > self.free_shipping_threshold:
            return 0
        return self.shipping_fee

    def amount_to_free_shipping(self, subtotal: int) -> int:
        """How much more the buyer must add to qualify for free shipping"""
        return max(0, self.free_shipping_threshold + 1 - subtotal)
