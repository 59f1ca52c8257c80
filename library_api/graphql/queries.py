"""
GraphQL Query Resolvers

Defines all read operations (queries) for the GraphQL API.
Each resolver reads through the catalog service using the context's
database session.
"""

from collections.abc import Sequence

import strawberry
from sqlalchemy.orm import Session
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext
from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import UserType
from library_api.models import Author, Book, User
from library_api.services import catalog


def author_to_graphql(author: Author, book_count: int = 0) -> AuthorType:
    """Convert SQLAlchemy Author model to GraphQL AuthorType."""
    return AuthorType(
        id=strawberry.ID(str(author.id)),
        name=author.name,
        born=author.born,
        book_count=book_count,
    )


def book_to_graphql(book: Book, book_counts: dict[int, int]) -> BookType:
    """
    Convert SQLAlchemy Book model to GraphQL BookType.

    Args:
        book: Book with its author loaded
        book_counts: Books per author id, from catalog.count_books_by_author
    """
    return BookType(
        id=strawberry.ID(str(book.id)),
        title=book.title,
        published=book.published,
        genres=list(book.genres or []),
        author=author_to_graphql(book.author, book_counts.get(book.author_id, 0)),
    )


def books_to_graphql(db: Session, books: Sequence[Book]) -> list[BookType]:
    """Convert books, counting their authors' books in one query."""
    if not books:
        return []

    book_counts = catalog.count_books_by_author(
        db, {book.author_id for book in books}
    )
    return [book_to_graphql(book, book_counts) for book in books]


def user_to_graphql(user: User) -> UserType:
    """Convert SQLAlchemy User model to GraphQL UserType."""
    return UserType(
        id=strawberry.ID(str(user.id)),
        username=user.username,
        favorite_genre=user.favorite_genre,
    )


@strawberry.type
class Query:
    """
    GraphQL Query type containing all read operations.

    All resolvers receive an `info` parameter that contains the
    GraphQL context with database session and current user.
    """

    @strawberry.field(description="Number of authors in the catalog")
    def author_count(self, info: Info[GraphQLContext, None]) -> int:
        return catalog.count_authors(info.context.db)

    @strawberry.field(description="Number of books in the catalog")
    def book_count(self, info: Info[GraphQLContext, None]) -> int:
        return catalog.count_books(info.context.db)

    @strawberry.field(description="All books, optionally filtered by author or genre")
    def all_books(
        self,
        info: Info[GraphQLContext, None],
        author: str | None = None,
        genre: str | None = None,
    ) -> list[BookType]:
        """
        Get books with an optional filter.

        Args:
            author: Only books by the author with exactly this name
            genre: Only books listing this genre (ignored when author is given)

        Returns:
            Matching books in the order they were added
        """
        db = info.context.db
        books = catalog.list_books(db, author=author, genre=genre)
        return books_to_graphql(db, books)

    @strawberry.field(description="All authors with their book counts")
    def all_authors(self, info: Info[GraphQLContext, None]) -> list[AuthorType]:
        """
        Get every author.

        Book counts come from a single grouped query rather than one
        count per author.
        """
        db = info.context.db
        authors = catalog.list_authors(db)
        book_counts = catalog.count_books_by_author(db)

        return [
            author_to_graphql(author, book_counts.get(author.id, 0))
            for author in authors
        ]

    @strawberry.field(description="Get the currently authenticated user")
    def me(self, info: Info[GraphQLContext, None]) -> UserType | None:
        """
        Get the current authenticated user.

        Returns None if not authenticated.
        """
        user = info.context.current_user

        if user is None:
            return None

        return user_to_graphql(user)
