"""
Database configuration and session management.
"""

from typing import Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool, StaticPool

from invoicing.config import settings


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.
    SQLite in-memory databases share one connection so every session sees the same data.
    """
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite+pysqlite://"):
            return create_engine(database_url, echo=echo, connect_args=connect_args, poolclass=StaticPool)
        return create_engine(database_url, echo=echo, connect_args=connect_args)

    return create_engine(database_url, echo=echo, poolclass=NullPool)


def create_session_factory(bind: Optional[Engine] = None) -> sessionmaker:
    """Create a session factory bound to an engine."""
    return sessionmaker(
        autoflush=False,
        expire_on_commit=False,
        bind=bind or engine,
    )


# Create SQLAlchemy engine
engine = create_db_engine(settings.database_url, echo=settings.database_echo)

# Create SessionLocal class
SessionLocal = create_session_factory(engine)

# Create declarative base
Base = declarative_base()


def create_all_tables(bind: Optional[Engine] = None) -> None:
    """Create every table known to the metadata."""
    # Import models so they register with Base.metadata
    from invoicing.infrastructure.db import models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)


def drop_all_tables(bind: Optional[Engine] = None) -> None:
    """Drop every table known to the metadata."""
    from invoicing.infrastructure.db import models  # noqa: F401
    Base.metadata.drop_all(bind=bind or engine)
