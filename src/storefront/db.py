import logging

from flask import Flask, current_app, g
from sqlalchemy import BigInteger, Integer, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.core.config import DatabaseConfig

logger = logging.getLogger(__name__)

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    pass


def create_db_engine(db_config: DatabaseConfig) -> Engine:
    """
    Build the SQLAlchemy engine for the configured URL.

    In-memory SQLite (used by the test suite) needs a single shared connection,
    so it gets a StaticPool instead of the usual QueuePool settings.
    """
    url = db_config.url
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            url = "postgresql+psycopg2://" + url[len(scheme):]
            break

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=db_config.echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        @event.listens_for(engine, "connect")
        def _enable_sqlite_fks(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        echo=db_config.echo,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_recycle=db_config.pool_recycle,
        pool_pre_ping=True,
    )


def create_all(engine: Engine) -> None:
    # Import models so every table is registered on Base.metadata.
    import storefront.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def init_app(app: Flask, engine: Engine) -> None:
    """Attach the engine and a session factory to the app; sessions are per request."""
    app.extensions["storefront.engine"] = engine
    app.extensions["storefront.sessionmaker"] = sessionmaker(
        bind=engine, autoflush=False, expire_on_commit=False
    )
    app.teardown_appcontext(close_session)


def get_engine() -> Engine:
    return current_app.extensions["storefront.engine"]


def get_session() -> Session:
    """Return the request's Session, opening one on first use."""
    if "db_session" not in g:
        g.db_session = current_app.extensions["storefront.sessionmaker"]()
    return g.db_session


def close_session(exc=None) -> None:
    session = g.pop("db_session", None)
    if session is not None:
        if exc is not None:
            session.rollback()
        session.close()
