"""
GraphQL Custom Scalars

Year is an input scalar for publication and birth years. Clients may send
it as an Int (2008) or as text ("2008"); the value reaches the resolver
unchanged and is converted to an integer by the pydantic schemas, so
non-numeric text is reported as BAD_USER_INPUT with the submitted value.

Register it on the schema through ``StrawberryConfig(scalar_map=...)``.
"""

from typing import NewType

import strawberry

Year = NewType("Year", object)


def parse_year(value: object) -> int | str:
    """
    Accept an Int or String year from a variable or literal.

    Raises:
        ValueError: For any other JSON type (bool, float, list, object)
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"Year must be an Int or a String, got {value!r}")
    return value


YEAR_SCALAR = strawberry.scalar(
    name="Year",
    description="A year given as an Int or as numeric text, e.g. 2008 or \"2008\"",
    serialize=lambda value: value,
    parse_value=parse_year,
)

SCALAR_MAP = {Year: YEAR_SCALAR}
