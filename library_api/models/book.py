"""
Book Model

The central model of the catalog.

A book holds a non-owning reference to its author (a foreign key); the
author row is persisted independently and outlives any single book.
Genres are an ordered list of plain strings stored in a JSON column, so
their order is kept exactly as submitted.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.author import Author


class Book(Base):
    """
    Book model representing books in the catalog.

    Table: books

    Fields:
    - title: Book title (required)
    - author_id: Foreign key to authors.id (required)
    - published: Publication year (optional)
    - genres: Ordered list of genre names

    Example:
        book = Book(
            title="Clean Code",
            author=author,
            published=2008,
            genres=["programming"],
        )
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    published: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Year of publication"
    )

    genres: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
        comment="Ordered list of genre names"
    )

    # Indexed because bookCount is aggregated by author_id
    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id"),
        index=True,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the book was added to the catalog"
    )

    author: Mapped["Author"] = relationship(
        "Author",
        back_populates="books",
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title[:30]}')"
