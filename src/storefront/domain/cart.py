import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Dict, Any


@dataclass
class CartLine:
    """A cart row joined with the product's current price"""
    cart_item_id: int
    product_id: int
    product_name: str
    shop_id: int
    unit_price: int  # paise, current product price
    quantity: int
    size: str = ""
    color: str = ""
    original_price: Optional[int] = None
    stock_quantity: int = 0
    image_url: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def subtotal(self) -> int:
        return self.unit_price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cart_item_id": self.cart_item_id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "shop_id": self.shop_id,
            "unit_price_paise": self.unit_price,
            "original_price_paise": self.original_price,
            "quantity": self.quantity,
            "size": self.size or None,
            "color": self.color or None,
            "subtotal_paise": self.subtotal,
            "in_stock": self.stock_quantity >= self.quantity,
            "image_url": self.image_url,
        }


@dataclass
class CartSnapshot:
    """The user's cart at a point in time"""
    user_id: int
    lines: List[CartLine] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def last_modified(self) -> Optional[datetime]:
        stamps = [line.updated_at for line in self.lines if line.updated_at is not None]
        return max(stamps) if stamps else None

    def fingerprint(self) -> str:
        """
        Stable token for the cart's current contents.

        Used as the idempotency key when the client sends none: the same cart
        (same rows, quantities and last-modified time) always yields the same
        key, so a replayed checkout cannot create a second order.
        """
        parts = [str(self.user_id)]
        for line in sorted(self.lines, key=lambda l: l.cart_item_id):
            parts.append(f"{line.cart_item_id}:{line.product_id}:{line.quantity}:{line.size}:{line.color}")
        last_modified = self.last_modified
        parts.append(last_modified.isoformat() if last_modified else "")
        digest = hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()
        return f"cart-{digest[:32]}"
