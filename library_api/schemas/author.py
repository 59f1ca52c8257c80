"""
Author Pydantic Schemas

These schemas define the constraints for Author-related operations.

Pydantic v2 Features Used:
- Field(): Define constraints and metadata
- field_validator: Validate and transform field values
"""

from pydantic import BaseModel, Field, field_validator

AUTHOR_NAME_MIN_LENGTH = 4


class AuthorBirthYearUpdate(BaseModel):
    """
    Schema for the editAuthor mutation.

    ``born`` accepts an int or numeric text and is normalized to int.
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Name of the author to update",
        examples=["Robert Martin"],
    )

    born: int = Field(
        ...,
        description="New birth year",
        examples=[1952],
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        """
        Validate that name is not just whitespace.

        Raises:
            ValueError: If the name is blank
        """
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()
