"""
GraphQL Mutation Resolvers

Defines all write operations (mutations) for the GraphQL API.
addBook and editAuthor require authentication; createUser and login
do not.
"""

import logging

import strawberry
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from strawberry.types import Info

from library_api.config import get_settings
from library_api.graphql.context import GraphQLContext
from library_api.graphql.errors import (
    AuthenticationError,
    NotFoundError,
    ValidationError,
    database_error_message,
    describe_validation_error,
)
from library_api.graphql.queries import (
    author_to_graphql,
    books_to_graphql,
    user_to_graphql,
)
from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.scalars import Year
from library_api.graphql.types.user import TokenType, UserType
from library_api.models.user import User
from library_api.schemas import AuthorBirthYearUpdate, BookCreate, UserCreate
from library_api.services import catalog
from library_api.services.events import EventType, get_broadcaster
from library_api.services.security import create_access_token

logger = logging.getLogger(__name__)
settings = get_settings()


def require_auth(info: Info[GraphQLContext, None]) -> User:
    """Helper to require authentication and return the user."""
    user = info.context.current_user
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user


@strawberry.type
class Mutation:
    """
    GraphQL Mutation type containing all write operations.

    Every mutation either fully succeeds or fails at its first error;
    nothing is retried.
    """

    # =========================================================================
    # Catalog Mutations
    # =========================================================================

    @strawberry.mutation(description="Add a book, creating its author if needed")
    def add_book(
        self,
        info: Info[GraphQLContext, None],
        title: str,
        author: str,
        published: Year | None = None,
        genres: list[str] | None = None,
    ) -> BookType | None:
        """
        Add a book to the catalog.

        Requires authentication. The author is looked up by name and
        created when missing. The stored book is published to bookAdded
        subscribers.

        ``published`` may be an Int or numeric text; blank text counts as
        not supplied.
        """
        require_auth(info)
        db = info.context.db

        args = {
            "title": title,
            "author": author,
            "published": published,
            "genres": genres or [],
        }

        if not title.strip() or not author.strip():
            raise ValidationError("Book title and author must be added", invalid_args=args)

        try:
            data = BookCreate(**args)
        except PydanticValidationError as e:
            raise ValidationError(describe_validation_error(e), invalid_args=args)

        try:
            book = catalog.add_book(db, data)
        except SQLAlchemyError as e:
            logger.warning(f"addBook rejected by database: {e}")
            raise ValidationError(database_error_message(e), invalid_args=args)

        book_type = books_to_graphql(db, [book])[0]
        get_broadcaster().publish(EventType.BOOK_ADDED, book_type)

        return book_type

    @strawberry.mutation(description="Set an author's birth year")
    def edit_author(
        self,
        info: Info[GraphQLContext, None],
        name: str,
        set_born_to: Year,
    ) -> AuthorType | None:
        """
        Update the birth year of the author with this name.

        Requires authentication. ``setBornTo`` may be an Int or numeric
        text. Fails with NOT_FOUND when no author has this name.
        """
        require_auth(info)
        db = info.context.db

        args = {"name": name, "setBornTo": set_born_to}

        blank_year = isinstance(set_born_to, str) and not set_born_to.strip()
        if not name.strip() or blank_year:
            raise ValidationError("Author and birthyear must be added", invalid_args=args)

        try:
            data = AuthorBirthYearUpdate(name=name, born=set_born_to)
        except PydanticValidationError as e:
            raise ValidationError(describe_validation_error(e), invalid_args=args)

        try:
            author = catalog.set_author_born(db, data.name, data.born)
        except SQLAlchemyError as e:
            logger.warning(f"editAuthor rejected by database: {e}")
            raise ValidationError(database_error_message(e), invalid_args=args)

        if author is None:
            raise NotFoundError("Author not found", invalid_args=args)

        book_counts = catalog.count_books_by_author(db, [author.id])
        return author_to_graphql(author, book_counts.get(author.id, 0))

    # =========================================================================
    # User Mutations
    # =========================================================================

    @strawberry.mutation(description="Create a user account")
    def create_user(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        favorite_genre: str,
        password: str | None = None,
    ) -> UserType | None:
        """
        Create a new user.

        ``password`` is optional; users created without one log in with
        the configured default password.
        """
        db = info.context.db

        args = {"username": username, "favoriteGenre": favorite_genre}

        try:
            data = UserCreate(
                username=username,
                favorite_genre=favorite_genre,
                password=password,
            )
        except PydanticValidationError as e:
            raise ValidationError(describe_validation_error(e), invalid_args=args)

        try:
            user = catalog.create_user(db, data, settings.default_user_password)
        except IntegrityError:
            raise ValidationError(f"Username '{username}' is already taken", invalid_args=args)
        except SQLAlchemyError as e:
            logger.warning(f"createUser rejected by database: {e}")
            raise ValidationError(database_error_message(e), invalid_args=args)

        return user_to_graphql(user)

    @strawberry.mutation(description="Log in and receive a bearer token")
    def login(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        password: str,
    ) -> TokenType | None:
        """
        Authenticate with username and password.

        Returns a token embedding the user's username and id.
        """
        db = info.context.db

        user = catalog.authenticate_user(db, username, password)

        if user is None:
            logger.info(f"Failed login for '{username}'")
            raise ValidationError("wrong credentials", invalid_args={"username": username})

        return TokenType(value=create_access_token(user))
