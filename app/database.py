from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base

from app.config import get_settings

settings = get_settings()


def build_engine(url: str):
    """
    Create a SQLAlchemy engine for the given URL.
    SQLite gets a single-thread-friendly setup, other backends a sized pool.
    """
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
    )


# Create SQLAlchemy engine with connection pooling
engine = build_engine(settings.DATABASE_URL)

# Base class for table definitions
Base = declarative_base()


def get_storer():
    """
    Dependency returning a storer bound to the application engine.
    The storer opens its own connection per call, so nothing needs closing here.
    """
    from app.storer.sql_storer import SQLStorer

    return SQLStorer(engine, batch_item_fetch=settings.ORDER_ITEMS_BATCH_FETCH)
