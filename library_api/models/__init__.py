"""
SQLAlchemy Models Package

This package contains all database models for the catalog.

Model Relationships:
- Author <- Book: One-to-Many (a book references one author,
                  an author can have many books)
- User: standalone, used for authentication

Import all models here to:
1. Make them available as: from library_api.models import Book, Author, User
2. Ensure Alembic and create_tables() discover them
"""

# The order matters for SQLAlchemy to resolve relationships
from library_api.models.author import Author
from library_api.models.book import Book
from library_api.models.user import User

__all__ = [
    "Author",
    "Book",
    "User",
]
