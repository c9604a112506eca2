"""Pytest fixtures for storefront tests."""

from types import SimpleNamespace

import pytest
from sqlalchemy.orm import Session

from storefront.app import create_app
from storefront.core.config import Config, DatabaseConfig
from storefront.db import create_all, get_session
from storefront.models import Product, User
from storefront.repositories import AddressRepository, ProductRepository, ShopRepository
from storefront.seed import seed


@pytest.fixture
def config():
    """Config against a private in-memory SQLite database."""
    return Config(database=DatabaseConfig(url="sqlite://"))


@pytest.fixture
def app(config):
    app = create_app(config)
    engine = app.extensions["storefront.engine"]
    create_all(engine)
    yield app
    engine.dispose()


@pytest.fixture
def engine(app):
    return app.extensions["storefront.engine"]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    """The same per-context Session the routes use, for service-level tests."""
    with app.app_context():
        yield get_session()


@pytest.fixture
def data(engine):
    """Seed users, a shop with products, and the buyer's default address."""
    with Session(engine) as s:
        ids = seed(s)
        shop = ShopRepository(s).get_by_seller(ids["seller"])
        address = AddressRepository(s).get_default(ids["buyer"])
        products = {p.slug: p.id for p in ProductRepository(s).list_for_shop(shop.id)}
        return SimpleNamespace(
            buyer_id=ids["buyer"],
            seller_id=ids["seller"],
            admin_id=ids["admin"],
            shop_id=shop.id,
            shop_slug=shop.slug,
            address_id=address.id,
            products=products,
        )


@pytest.fixture
def make_product(engine, data):
    """Create an extra product in the seeded shop and return its id."""
    def _make(price_paise, name=None, stock_quantity=50, original_price_paise=None, **extra):
        with Session(engine) as s:
            n = s.query(Product).count() + 1
            product = Product(
                shop_id=extra.pop("shop_id", data.shop_id),
                name=name or f"Test Product {n}",
                slug=f"test-product-{n}",
                price_paise=price_paise,
                original_price_paise=original_price_paise,
                stock_quantity=stock_quantity,
                sizes=extra.pop("sizes", []),
                colors=extra.pop("colors", []),
                **extra,
            )
            s.add(product)
            s.commit()
            return product.id
    return _make


@pytest.fixture
def make_user(engine):
    def _make(role="buyer", email=None):
        with Session(engine) as s:
            n = s.query(User).count() + 1
            user = User(email=email or f"user{n}@example.com", full_name=f"User {n}", role=role)
            s.add(user)
            s.commit()
            return user.id
    return _make


@pytest.fixture
def auth():
    """Headers identifying the caller."""
    def _headers(user_id, **extra):
        return {"X-User-Id": str(user_id), **extra}
    return _headers
