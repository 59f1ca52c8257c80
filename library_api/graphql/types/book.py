"""
GraphQL Book Type

Defines the Book type for GraphQL queries and the bookAdded subscription.
"""

import strawberry

from library_api.graphql.types.author import AuthorType


@strawberry.type(name="Book")
class BookType:
    """
    GraphQL type representing a book.

    Maps to the Book SQLAlchemy model with its author resolved.
    """

    id: strawberry.ID
    title: str
    author: AuthorType
    published: int | None = None
    genres: list[str] = strawberry.field(default_factory=list)
