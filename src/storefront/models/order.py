from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger, Boolean, CheckConstraint, Column, DateTime, ForeignKey,
    Integer, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from storefront.db import Base, BigIntPK
from storefront.models.catalog import JSONType


class Address(Base):
    """
    A delivery address in a user's address book.

    At most one address per user has is_default set; AddressRepository
    clears the previous default in the same transaction that sets a new one.
    """

    __tablename__ = "addresses"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    full_name = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    address_line_1 = Column(Text, nullable=False)
    address_line_2 = Column(Text, nullable=True)
    city = Column(Text, nullable=False)
    state = Column(Text, nullable=False)
    postal_code = Column(Text, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def snapshot(self) -> dict:
        """Copy of the address as it is stored on an order."""
        return {
            "id": self.id,
            "full_name": self.full_name,
            "phone": self.phone,
            "address_line_1": self.address_line_1,
            "address_line_2": self.address_line_2,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
        }

    def __repr__(self) -> str:
        return f"<Address id={self.id} city={self.city!r} default={self.is_default}>"


class Order(Base):
    """
    A placed order.

    shipping_address is a JSON snapshot taken at checkout so later edits to
    (or deletion of) the address book entry never rewrite order history;
    shipping_address_id is kept only as a back-reference.

    total_paise = subtotal_paise + shipping_paise, and subtotal_paise equals
    the sum of the line items' subtotal_paise.

    (user_id, idempotency_key) is unique: a retried checkout with the same key
    resolves to the existing order instead of a duplicate.
    """

    __tablename__ = "orders"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(
        BigInteger, ForeignKey("users.id"), nullable=False, index=True
    )
    status = Column(Text, nullable=False, default="confirmed")
    payment_method = Column(Text, nullable=False)
    subtotal_paise = Column(BigInteger, nullable=False)
    shipping_paise = Column(BigInteger, nullable=False)
    total_paise = Column(BigInteger, nullable=False)
    currency = Column(Text, nullable=False, default="INR")
    shipping_address_id = Column(
        BigInteger, ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True
    )
    shipping_address = Column(JSONType, nullable=False)
    idempotency_key = Column(Text, nullable=False)
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
        CheckConstraint(
            "status IN ('pending','confirmed','shipped','delivered','cancelled')",
            name="ck_order_status",
        ),
        CheckConstraint(
            "payment_method IN ('card','upi','cash_on_delivery')",
            name="ck_order_payment_method",
        ),
        CheckConstraint("total_paise >= 0", name="ck_order_total"),
        CheckConstraint("shipping_paise >= 0", name="ck_order_shipping"),
        UniqueConstraint("user_id", "idempotency_key", name="uq_order_idempotency"),
    )

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    def __repr__(self) -> str:
        return (
            f"<Order id={self.id} status={self.status!r} "
            f"total_paise={self.total_paise}>"
        )


class OrderItem(Base):
    """
    A single line item within an order.

    price_paise and product_name are snapshotted at purchase time so later
    catalogue edits do not alter historical orders.
    """

    __tablename__ = "order_items"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    order_id = Column(
        BigInteger, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(
        BigInteger, ForeignKey("products.id", ondelete="SET NULL"), nullable=True
    )
    product_name = Column(Text, nullable=False)
    shop_id = Column(BigInteger, nullable=True, index=True)
    quantity = Column(Integer, nullable=False)
    price_paise = Column(BigInteger, nullable=False)
    subtotal_paise = Column(BigInteger, nullable=False)
    size = Column(Text, nullable=False, default="")
    color = Column(Text, nullable=False, default="")

    __table_args__ = (
        CheckConstraint("price_paise >= 0", name="ck_item_price"),
        CheckConstraint("quantity > 0", name="ck_item_quantity"),
        CheckConstraint("subtotal_paise >= 0", name="ck_item_subtotal"),
    )

    order = relationship("Order", back_populates="items")

    def __repr__(self) -> str:
        return (
            f"<OrderItem id={self.id} product_id={self.product_id} "
            f"qty={self.quantity}>"
        )
