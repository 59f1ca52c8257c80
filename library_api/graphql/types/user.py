"""
GraphQL User Type

Defines the User and Token types.
Only exposes public/safe fields; the password hash never leaves the model.
"""

import strawberry


@strawberry.type(name="User")
class UserType:
    """
    GraphQL type representing a user.

    Maps to the User SQLAlchemy model.
    """

    id: strawberry.ID
    username: str
    favorite_genre: str


@strawberry.type(name="Token")
class TokenType:
    """
    Response type for the login mutation.

    ``value`` is the signed token to send as "Authorization: Bearer <value>".
    """

    value: str
