from datetime import datetime, timezone

from sqlalchemy import (
    JSON, BigInteger, Boolean, CheckConstraint, Column, DateTime, Float,
    ForeignKey, Integer, Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from storefront.db import Base, BigIntPK

JSONType = JSON().with_variant(JSONB, "postgresql")


class Category(Base):
    """Top-level grouping for products (e.g. Dresses, Footwear)."""

    __tablename__ = "categories"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    slug = Column(Text, nullable=False, unique=True)

    products = relationship("Product", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category id={self.id} name={self.name!r}>"


class Brand(Base):
    __tablename__ = "brands"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    slug = Column(Text, nullable=False, unique=True)

    products = relationship("Product", back_populates="brand")

    def __repr__(self) -> str:
        return f"<Brand id={self.id} name={self.name!r}>"


class Shop(Base):
    """
    A seller's storefront. Each seller owns at most one shop.

    latitude/longitude feed the get_nearby_shops database procedure; they are
    nullable because a shop can register before it is geocoded.
    """

    __tablename__ = "shops"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    seller_id = Column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    address_line_1 = Column(Text, nullable=True)
    address_line_2 = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    state = Column(Text, nullable=True)
    postal_code = Column(Text, nullable=True)
    business_type = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    products = relationship("Product", back_populates="shop")

    def __repr__(self) -> str:
        return f"<Shop id={self.id} slug={self.slug!r}>"


class Product(Base):
    """
    A sellable item listed by a shop.

    price_paise is what the buyer pays. original_price_paise, when higher,
    is the struck-through list price; discount_percentage is derived from the
    two when the product is created or repriced.

    sizes and colors are free-form lists; a cart line picks one of each.
    """

    __tablename__ = "products"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    shop_id = Column(
        BigInteger, ForeignKey("shops.id", ondelete="CASCADE"), nullable=False
    )
    category_id = Column(BigInteger, ForeignKey("categories.id"), nullable=True)
    brand_id = Column(BigInteger, ForeignKey("brands.id"), nullable=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    price_paise = Column(BigInteger, nullable=False)
    original_price_paise = Column(BigInteger, nullable=True)
    discount_percentage = Column(Integer, nullable=False, default=0)
    stock_quantity = Column(Integer, nullable=False, default=0)
    sizes = Column(JSONType, nullable=False, default=list)
    colors = Column(JSONType, nullable=False, default=list)
    image_url = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("price_paise >= 0", name="ck_product_price"),
        CheckConstraint("stock_quantity >= 0", name="ck_product_stock"),
    )

    shop = relationship("Shop", back_populates="products")
    category = relationship("Category", back_populates="products")
    brand = relationship("Brand", back_populates="products")

    def __repr__(self) -> str:
        return f"<Product id={self.id} slug={self.slug!r}>"
