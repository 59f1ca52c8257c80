"""
User Model

Represents an account that can log in and perform mutations.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from library_api.database import Base


class User(Base):
    """
    User model representing registered users.

    Table: users

    Users are created once by the createUser mutation and never changed.
    Each user has its own bcrypt hash (with its own salt); the plain
    password is never stored.

    Indexes:
    - Primary key on id (automatic)
    - username: Unique index for login lookups

    Example:
        user = User(
            username="mluukkai",
            favorite_genre="refactoring",
            hashed_password=hash_password("secret"),
        )
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique username used to log in"
    )

    favorite_genre: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Genre used for personal recommendations"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the user registered"
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, username='{self.username}')"
