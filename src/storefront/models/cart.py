from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Integer, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from storefront.db import Base, BigIntPK


class CartItem(Base):
    """
    One product/variant + quantity pair in a user's cart.

    size and color are stored as '' when the product has no such option so
    the (user, product, size, color) uniqueness holds without NULL gaps.
    quantity must be > 0; removing an item deletes the row.
    """

    __tablename__ = "cart_items"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(
        BigInteger, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    quantity = Column(Integer, nullable=False)
    size = Column(Text, nullable=False, default="")
    color = Column(Text, nullable=False, default="")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_cart_item_quantity"),
        UniqueConstraint("user_id", "product_id", "size", "color", name="uq_cart_item_variant"),
    )

    product = relationship("Product")

    def __repr__(self) -> str:
        return (
            f"<CartItem id={self.id} product_id={self.product_id} "
            f"qty={self.quantity}>"
        )


class WishlistItem(Base):
    __tablename__ = "wishlist_items"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(
        BigInteger, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_wishlist_item"),
    )

    product = relationship("Product")

    def __repr__(self) -> str:
        return f"<WishlistItem id={self.id} product_id={self.product_id}>"
