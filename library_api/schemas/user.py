"""
User Pydantic Schemas

Schemas:
- UserCreate: Data for the createUser mutation
"""

import re

from pydantic import BaseModel, Field, field_validator


class UserCreate(BaseModel):
    """
    Schema for user creation.

    ``password`` is optional; when omitted the configured default password
    is hashed for the new user instead.
    """

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        description="Unique username (3-50 characters)",
        examples=["mluukkai"],
    )

    favorite_genre: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="The user's favourite genre",
        examples=["refactoring"],
    )

    password: str | None = Field(
        default=None,
        min_length=1,
        max_length=128,
        description="Login password",
    )

    @field_validator("username")
    @classmethod
    def username_must_be_valid(cls, v: str) -> str:
        """
        Validate username format.

        Rules:
        - Must start with a letter
        - Only letters, digits, underscores, dots and dashes
        """
        if not re.match(r"^[a-zA-Z][a-zA-Z0-9_.-]*$", v):
            raise ValueError(
                "Username must start with a letter and contain only "
                "letters, numbers, underscores, dots and dashes"
            )
        return v

    @field_validator("favorite_genre")
    @classmethod
    def genre_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Favorite genre cannot be empty or whitespace")
        return v.strip()

