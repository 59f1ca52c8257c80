"""
Catalog Service

Business operations on authors, books and users, shared by the GraphQL
resolvers and the seed script.

Functions take an explicit SQLAlchemy session and either return ORM
objects or raise SQLAlchemy errors; translating failures into API errors
is the caller's job. Functions that write commit on success and roll the
session back on failure, so a mutation never leaves half of its work
behind (e.g. a new author without the book that created it).
"""

import logging
from collections.abc import Iterable

from sqlalchemy import func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from library_api.models import Author, Book, User
from library_api.schemas import BookCreate, UserCreate
from library_api.services.security import hash_password, verify_password

logger = logging.getLogger(__name__)

# Dialects with a native "INSERT ... ON CONFLICT DO NOTHING"
_INSERT_IF_ABSENT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


# =============================================================================
# Counts and Aggregations
# =============================================================================


def count_authors(db: Session) -> int:
    return db.execute(select(func.count(Author.id))).scalar() or 0


def count_books(db: Session) -> int:
    return db.execute(select(func.count(Book.id))).scalar() or 0


def count_books_by_author(
    db: Session,
    author_ids: Iterable[int] | None = None,
) -> dict[int, int]:
    """
    Count books per author with a single grouped query.

    Authors without books are absent from the result; callers should
    default to 0.

    Args:
        db: Database session
        author_ids: Restrict the aggregation to these authors (all if None)

    Returns:
        Mapping of author id to number of books referencing it
    """
    stmt = select(Book.author_id, func.count(Book.id)).group_by(Book.author_id)

    if author_ids is not None:
        stmt = stmt.where(Book.author_id.in_(list(author_ids)))

    return {author_id: count for author_id, count in db.execute(stmt).all()}


# =============================================================================
# Reads
# =============================================================================


def list_authors(db: Session) -> list[Author]:
    stmt = select(Author).order_by(Author.id)
    return list(db.execute(stmt).scalars().all())


def get_author_by_name(db: Session, name: str) -> Author | None:
    stmt = select(Author).where(Author.name == name)
    return db.execute(stmt).scalar_one_or_none()


def get_book(db: Session, book_id: int) -> Book | None:
    """Get a book with its author loaded."""
    stmt = (
        select(Book)
        .options(selectinload(Book.author))
        .where(Book.id == book_id)
    )
    return db.execute(stmt).scalar_one_or_none()


def list_books(
    db: Session,
    author: str | None = None,
    genre: str | None = None,
) -> list[Book]:
    """
    List books, optionally filtered by author name or genre.

    At most one filter applies: ``author`` wins over ``genre``. All books
    are loaded (with their authors) and filtered in memory, because
    genres live in a JSON list that is not portably queryable.

    Args:
        db: Database session
        author: Keep only books whose author's name equals this
        genre: Keep only books whose genres contain this

    Returns:
        Books in insertion order
    """
    stmt = select(Book).options(selectinload(Book.author)).order_by(Book.id)
    books = list(db.execute(stmt).scalars().all())

    if author:
        return [book for book in books if book.author.name == author]

    if genre:
        return [book for book in books if genre in (book.genres or [])]

    return books


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> User | None:
    stmt = select(User).where(User.username == username)
    return db.execute(stmt).scalar_one_or_none()


# =============================================================================
# Writes
# =============================================================================


def find_or_create_author(db: Session, name: str) -> Author:
    """
    Return the author with this name, creating it if needed.

    Creation is a single "insert if absent" statement keyed on the unique
    name, so two requests adding books by the same new author end up
    sharing one author row. Does not commit.
    """
    author = get_author_by_name(db, name)
    if author is not None:
        return author

    insert = _INSERT_IF_ABSENT.get(db.get_bind().dialect.name)

    if insert is not None:
        stmt = insert(Author.__table__).values(name=name).on_conflict_do_nothing(
            index_elements=["name"]
        )
        result = db.execute(stmt)
        if result.rowcount:
            logger.info(f"Created author '{name}'")
        else:
            logger.info(f"Author '{name}' was created concurrently")
    else:
        # Other dialects: rely on the unique constraint and re-read
        try:
            with db.begin_nested():
                db.add(Author(name=name))
            logger.info(f"Created author '{name}'")
        except IntegrityError:
            logger.info(f"Author '{name}' was created concurrently")

    return db.execute(select(Author).where(Author.name == name)).scalar_one()


def add_book(db: Session, data: BookCreate) -> Book:
    """
    Store a book, finding or creating its author by name.

    The author and the book are committed together.

    Args:
        db: Database session
        data: Validated book input

    Returns:
        The stored book with its author loaded

    Raises:
        SQLAlchemyError: If the database rejects the write (session rolled back)
    """
    try:
        author = find_or_create_author(db, data.author)
        book = Book(
            title=data.title,
            published=data.published,
            genres=list(data.genres),
            author_id=author.id,
        )
        db.add(book)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(f"Added book '{data.title}' by '{data.author}' (id={book.id})")
    return get_book(db, book.id)


def set_author_born(db: Session, name: str, born: int) -> Author | None:
    """
    Set an author's birth year.

    A single UPDATE statement, so concurrent edits never interleave a
    read and a write; the last one to run wins.

    Returns:
        The updated author, or None if no author has this name

    Raises:
        SQLAlchemyError: If the database rejects the write (session rolled back)
    """
    try:
        result = db.execute(
            update(Author).where(Author.name == name).values(born=born)
        )
        if result.rowcount == 0:
            db.rollback()
            return None
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(f"Set birth year of '{name}' to {born}")
    return get_author_by_name(db, name)


def create_user(db: Session, data: UserCreate, default_password: str) -> User:
    """
    Create a user with a bcrypt-hashed password.

    Uniqueness of the username is enforced by the database, not checked
    beforehand.

    Raises:
        IntegrityError: If the username is taken (session rolled back)
    """
    user = User(
        username=data.username,
        favorite_genre=data.favorite_genre,
        hashed_password=hash_password(data.password or default_password),
    )
    db.add(user)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(user)
    logger.info(f"Created user '{user.username}' (id={user.id})")
    return user


def authenticate_user(db: Session, username: str, password: str) -> User | None:
    """
    Check a username/password pair.

    Returns:
        The user if the credentials match, None otherwise
    """
    user = get_user_by_username(db, username)

    if user is None or not verify_password(password, user.hashed_password):
        return None

    return user
