"""
Book Pydantic Schemas

The record constraints a book must satisfy before it is stored.
GraphQL only checks argument types; length limits and year coercion
live here so every caller (resolvers, seed script) validates the same way.
"""

from pydantic import BaseModel, Field, field_validator

from library_api.schemas.author import AUTHOR_NAME_MIN_LENGTH

BOOK_TITLE_MIN_LENGTH = 2


class BookCreate(BaseModel):
    """
    Schema for adding a book.

    ``author`` is the author's name, not an id: the author is found or
    created by name when the book is stored.

    ``published`` accepts a year as int or as numeric text ("2008") and
    normalizes it to int.
    """

    title: str = Field(
        ...,
        min_length=BOOK_TITLE_MIN_LENGTH,
        max_length=500,
        description="Book title",
        examples=["Clean Code"],
    )

    author: str = Field(
        ...,
        min_length=AUTHOR_NAME_MIN_LENGTH,
        max_length=255,
        description="Name of the book's author",
        examples=["Robert Martin"],
    )

    published: int | None = Field(
        default=None,
        description="Year of publication",
        examples=[2008],
    )

    genres: list[str] = Field(
        default_factory=list,
        description="Ordered list of genre names",
        examples=[["refactoring", "programming"]],
    )

    @field_validator("title", "author", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        """Normalize surrounding whitespace before the length checks run."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("published", mode="before")
    @classmethod
    def blank_year_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("genres")
    @classmethod
    def drop_blank_genres(cls, v: list[str]) -> list[str]:
        """Strip genre names and drop empty ones, keeping their order."""
        return [genre.strip() for genre in v if genre.strip()]
