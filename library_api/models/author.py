"""
Author Model

Represents an author in the catalog.

An author's book count is not stored; it is computed from the books table
when authors are returned (see services.catalog.count_books_by_author).
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.book import Book


class Author(Base):
    """
    Author model representing writers in the catalog.

    Table: authors

    Relationships:
    - books: One-to-Many, a book references exactly one author

    Indexes:
    - Primary key on id (automatic)
    - name: Unique index, the business key used by addBook/editAuthor

    Example:
        author = Author(name="Robert Martin", born=1952)
        db.add(author)
        db.commit()
    """

    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(primary_key=True)

    # unique=True is what makes find-or-create by name safe under
    # concurrent addBook calls
    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Author's full name"
    )

    born: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Birth year"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the author record was created"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="When the author record was last updated"
    )

    books: Mapped[list["Book"]] = relationship(
        "Book",
        back_populates="author",
    )

    def __repr__(self) -> str:
        return f"Author(id={self.id}, name='{self.name}')"
