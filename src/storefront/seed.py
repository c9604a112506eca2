"""
Seed script -- populates the database with realistic development data.

Run with:
    storefront-seed

Users, categories, brands, the demo shop and its products are looked up
before inserting, so running the script twice leaves one copy of each.
Tables are created first when they do not exist yet.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.core.config import get_config
from storefront.db import create_all, create_db_engine
from storefront.models import Address, Brand, Category, Product, Shop, User
from storefront.repositories import ProductRepository, ShopRepository, UserRepository
from storefront.utils.formatting import discount_percentage, slugify

logger = logging.getLogger(__name__)

USERS = [
    {"email": "admin@storefront.dev", "full_name": "Asha Admin", "role": "admin"},
    {"email": "seller@storefront.dev", "full_name": "Vikram Textiles", "role": "seller"},
    {"email": "buyer@storefront.dev", "full_name": "Priya Buyer", "role": "buyer"},
]

CATEGORIES = ["Men", "Women", "Kids", "Accessories"]
BRANDS = ["Loomcraft", "Urban Thread", "Saffron Lane"]

PRODUCTS = [
    {
        "name": "Linen Kurta",
        "description": "Breathable handloom linen, straight fit.",
        "category": "Men",
        "brand": "Loomcraft",
        "price_paise": 129900,
        "original_price_paise": 159900,
        "stock_quantity": 40,
        "sizes": ["S", "M", "L", "XL"],
        "colors": ["white", "sage"],
        "is_featured": True,
    },
    {
        "name": "Block Print Saree",
        "description": "Cotton saree with hand block print border.",
        "category": "Women",
        "brand": "Saffron Lane",
        "price_paise": 249900,
        "original_price_paise": None,
        "stock_quantity": 15,
        "sizes": [],
        "colors": ["indigo", "rust"],
        "is_featured": True,
    },
    {
        "name": "Denim Jacket",
        "description": "Mid-wash denim, relaxed cut.",
        "category": "Women",
        "brand": "Urban Thread",
        "price_paise": 189900,
        "original_price_paise": 219900,
        "stock_quantity": 25,
        "sizes": ["XS", "S", "M", "L"],
        "colors": ["blue"],
        "is_featured": False,
    },
    {
        "name": "Kids Cotton Tee",
        "description": "Soft combed cotton tee.",
        "category": "Kids",
        "brand": "Urban Thread",
        "price_paise": 49900,
        "original_price_paise": 59900,
        "stock_quantity": 100,
        "sizes": ["2-3Y", "4-5Y", "6-7Y"],
        "colors": ["yellow", "green"],
        "is_featured": False,
    },
    {
        "name": "Jute Tote Bag",
        "description": "Everyday tote, natural jute with cotton lining.",
        "category": "Accessories",
        "brand": "Loomcraft",
        "price_paise": 39900,
        "original_price_paise": None,
        "stock_quantity": 3,
        "sizes": [],
        "colors": [],
        "is_featured": False,
    },
]


def _named(session: Session, model, name: str):
    """Fetch a Category or Brand by name, creating it when missing."""
    row = session.execute(select(model).where(model.name == name)).scalar_one_or_none()
    if row is None:
        row = model(name=name, slug=slugify(name))
        session.add(row)
        session.flush()
    return row


def seed(session: Session) -> dict:
    """Insert the development data set and return the ids of the demo users."""
    user_repo = UserRepository(session)
    users = {}
    for data in USERS:
        user = user_repo.get_by_email(data["email"])
        if user is None:
            user = user_repo.add(User(**data))
        users[data["role"]] = user
    print("  [+] Users seeded")

    categories = {name: _named(session, Category, name) for name in CATEGORIES}
    brands = {name: _named(session, Brand, name) for name in BRANDS}
    print("  [+] Categories and brands seeded")

    seller = users["seller"]
    shop = ShopRepository(session).get_by_seller(seller.id)
    if shop is None:
        shop = ShopRepository(session).add(Shop(
            seller_id=seller.id,
            name="Vikram Textiles",
            slug="vikram-textiles",
            description="Handloom and everyday wear from Jaipur.",
            phone="+91 98290 00000",
            email=seller.email,
            address_line_1="12 Johari Bazaar",
            city="Jaipur",
            state="Rajasthan",
            postal_code="302003",
            business_type="retail",
            latitude=26.9239,
            longitude=75.8267,
            is_verified=True,
        ))
    print(f"  [+] Shop: {shop.name}")

    product_repo = ProductRepository(session)
    for p in PRODUCTS:
        slug = slugify(p["name"])
        if product_repo.slug_taken(shop.id, slug):
            continue
        product_repo.add(Product(
            shop_id=shop.id,
            category_id=categories[p["category"]].id,
            brand_id=brands[p["brand"]].id,
            name=p["name"],
            slug=slug,
            description=p["description"],
            price_paise=p["price_paise"],
            original_price_paise=p["original_price_paise"],
            discount_percentage=discount_percentage(p["price_paise"], p["original_price_paise"]),
            stock_quantity=p["stock_quantity"],
            sizes=p["sizes"],
            colors=p["colors"],
            is_featured=p["is_featured"],
        ))
        print(f"  [+] Product: {p['name']}")

    buyer = users["buyer"]
    has_address = session.execute(
        select(Address.id).where(Address.user_id == buyer.id).limit(1)
    ).first()
    if has_address is None:
        session.add(Address(
            user_id=buyer.id,
            full_name=buyer.full_name,
            phone="+91 99870 12345",
            address_line_1="4th Floor, Sea View Apartments",
            address_line_2="Carter Road, Bandra West",
            city="Mumbai",
            state="Maharashtra",
            postal_code="400050",
            is_default=True,
        ))
        print("  [+] Buyer address seeded")

    session.commit()
    return {role: user.id for role, user in users.items()}


def main() -> None:
    config = get_config()
    logging.basicConfig(level=config.app.log_level.upper())
    engine = create_db_engine(config.database)
    create_all(engine)

    print("Seeding database...")
    with Session(engine) as session:
        ids = seed(session)
    print("Done. Demo users (send as X-User-Id):")
    for role, user_id in ids.items():
        print(f"  {role:<7} {user_id}")


if __name__ == "__main__":
    main()
