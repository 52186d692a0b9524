import logging
import os
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()

# Internal lazy globals
_engine: Optional[Engine] = None
_SessionLocal = None
_database_url: Optional[str] = None


def build_engine(database_url: str) -> Engine:
    """Create an engine suitable for ``database_url``.

    In-memory SQLite gets a single shared connection so DDL and data persist
    across sessions.
    """
    url = make_url(database_url)
    if url.drivername.startswith("sqlite"):
        if url.database in (None, "", ":memory:"):
            return create_engine(
                database_url,
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(
            database_url, echo=False, connect_args={"check_same_thread": False}
        )
    return create_engine(database_url, echo=False, pool_pre_ping=True)


def get_engine(database_url: Optional[str] = None) -> Engine:
    """Return a cached SQLAlchemy engine, creating it from DATABASE_URL on
    first call or when the URL changes."""
    global _engine, _SessionLocal, _database_url
    database_url = database_url or os.getenv("DATABASE_URL", "sqlite:///:memory:")
    if _engine is None or _database_url != database_url:
        if _engine is not None:
            _engine.dispose()
        _engine = build_engine(database_url)
        _SessionLocal = None
        _database_url = database_url
        logger.debug(
            "SQLAlchemy engine created",
            extra={"context": {"dialect": _engine.dialect.name}},
        )
    return _engine


def get_sessionmaker(database_url: Optional[str] = None):
    """Return a cached sessionmaker bound to the lazy engine."""
    global _SessionLocal
    engine = get_engine(database_url)
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )
    return _SessionLocal


def SessionLocal(database_url: Optional[str] = None) -> Session:
    """Return a new Session bound to the configured database."""
    return get_sessionmaker(database_url)()


def create_tables(engine: Optional[Engine] = None) -> None:
    """Create all tables in database using the lazy engine."""
    # Importing the models populates Base.metadata
    from zoo_registry.db import base  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())
