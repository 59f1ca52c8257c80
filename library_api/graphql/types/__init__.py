"""
GraphQL Types Package

This package contains all GraphQL type definitions that map to our
SQLAlchemy models. Types are defined using Strawberry's decorator syntax
and exposed under the schema names Author, Book, User and Token.
"""

from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.scalars import SCALAR_MAP, Year
from library_api.graphql.types.user import TokenType, UserType

__all__ = [
    "AuthorType",
    "BookType",
    "SCALAR_MAP",
    "TokenType",
    "UserType",
    "Year",
]
