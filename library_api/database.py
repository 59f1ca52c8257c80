"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the catalog.

Each GraphQL operation gets its own session through FastAPI's dependency
injection ("session per request"):
1. Request arrives → create a new session
2. Resolvers use that session for all database operations
3. Mutations commit on success, rollback on failure
4. The session is closed when the request (or subscription) ends

The engine, session factory and Base are module-level; everything that
needs a session receives it explicitly via the GraphQL context.
"""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from library_api.config import get_settings

settings = get_settings()


def build_engine(database_url: str, debug: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for a database URL.

    SQLite needs ``check_same_thread=False`` because FastAPI may run a
    request in a different thread than the one that opened the connection;
    pool sizing only applies to server databases.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=debug,
        )

    return create_engine(
        database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,  # Verify connections are alive before using
        echo=debug,
    )


engine = build_engine(settings.database_url, debug=settings.debug)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic and create_tables() discover tables through Base.metadata.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    The GraphQL context getter depends on this, so every operation works
    on a fresh session that is closed when the request ends, even if an
    exception occurs. Tests override it through
    ``app.dependency_overrides[get_db]``.

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables.

    Called from the application lifespan. Production deployments can use
    the Alembic environment in ``alembic/`` instead.
    """
    # Import models so they are registered with Base.metadata
    import library_api.models  # noqa: F401

    Base.metadata.create_all(bind=engine)

