"""
Pydantic Schemas Package

This package contains Pydantic models for input validation.

WHY Separate Schemas from SQLAlchemy Models?
============================================
1. Validation: Record constraints (lengths, year coercion) are checked
   before anything touches the database
2. Decoupling: Database schema can evolve independently of the API
3. One place for rules shared by resolvers and scripts
"""

from library_api.schemas.author import AUTHOR_NAME_MIN_LENGTH, AuthorBirthYearUpdate
from library_api.schemas.book import BOOK_TITLE_MIN_LENGTH, BookCreate
from library_api.schemas.user import UserCreate

__all__ = [
    "AUTHOR_NAME_MIN_LENGTH",
    "BOOK_TITLE_MIN_LENGTH",
    "AuthorBirthYearUpdate",
    "BookCreate",
    "UserCreate",
]
