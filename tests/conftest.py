"""
pytest Fixtures for Library Catalog API Tests

Shared fixtures used across all test files:
- A fresh in-memory SQLite database per test
- A TestClient wired to that database through dependency overrides
- Sample users, authors and books
- Bearer tokens for authenticated requests

FIXTURE SCOPES:
- function (default): New instance per test function

Every test gets its own engine and schema. Mutations commit, so rolling
back an outer transaction would not isolate them; dropping the tables
afterwards does.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting, keeps the app's own engine in memory
# and sets a test secret key
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["GRAPHQL_IDE"] = "none"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from library_api.database import Base, get_db
from library_api.main import app
from library_api.models import Author, Book, User
from library_api.services.security import create_access_token, hash_password

TEST_PASSWORD = "SecurePass123"

# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """
    Create a SQLite in-memory database engine with all tables.

    StaticPool keeps a single connection alive, so the in-memory database
    survives between sessions and is shared with the TestClient's thread.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine: Engine) -> Generator[Session, None, None]:
    """Create a database session bound to the test engine."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    The get_db dependency (used by the GraphQL context getter) is
    overridden so resolvers see the same session as the test.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    user = User(
        username="mluukkai",
        favorite_genre="refactoring",
        hashed_password=hash_password(TEST_PASSWORD),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def sample_author(db_session: Session) -> Author:
    """Create a sample author without books."""
    author = Author(name="Robert Martin", born=1952)
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def sample_books(db_session: Session, sample_author: Author) -> list[Book]:
    """
    Create a small catalog: two books by Robert Martin and one by
    Martin Fowler, with overlapping genres.
    """
    fowler = Author(name="Martin Fowler")
    db_session.add(fowler)
    db_session.flush()

    books = [
        Book(
            title="Clean Code",
            published=2008,
            genres=["refactoring"],
            author_id=sample_author.id,
        ),
        Book(
            title="Agile software development",
            published=2002,
            genres=["agile", "patterns", "design"],
            author_id=sample_author.id,
        ),
        Book(
            title="Refactoring, edition 2",
            published=2018,
            genres=["refactoring"],
            author_id=fowler.id,
        ),
    ]
    db_session.add_all(books)
    db_session.commit()
    for book in books:
        db_session.refresh(book)

    return books


# =============================================================================
# AUTH FIXTURES
# =============================================================================


@pytest.fixture
def token(sample_user: User) -> str:
    """A valid bearer token for sample_user."""
    return create_access_token(sample_user)


@pytest.fixture
def auth_headers(token: str) -> dict[str, str]:
    """Authorization header for sample_user."""
    return {"Authorization": f"Bearer {token}"}
