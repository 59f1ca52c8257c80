"""
GraphQL Context

Provides request context to all GraphQL resolvers:
- Database session for queries and mutations
- Current authenticated user (if any)

The context is created fresh for each GraphQL request (and once per
subscription connection) and passed to all resolvers via ``info``.

Authentication rules:
- No Authorization header, or one without the "Bearer " prefix:
  anonymous context, not an error
- A bearer token that fails verification, or a "Bearer" header with
  no token after it: the request is rejected
  before any resolver runs (HTTP 401, or WebSocket policy violation)
- A valid token for a user that no longer exists: anonymous context
"""

import logging
from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, WebSocket, WebSocketException, status
from fastapi.requests import HTTPConnection
from sqlalchemy.orm import Session
from strawberry.fastapi import BaseContext

from library_api.database import get_db
from library_api.services.catalog import get_user
from library_api.services.security import InvalidTokenError, decode_token

if TYPE_CHECKING:
    from library_api.models.user import User

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class GraphQLContext(BaseContext):
    """
    Context object available to all GraphQL resolvers.

    Attributes:
        db: SQLAlchemy database session
        current_user: Currently authenticated user (None if not authenticated)
    """

    def __init__(self, db: Session, current_user: "User | None" = None):
        super().__init__()
        self.db = db
        self.current_user = current_user


def get_bearer_token(authorization: str | None) -> str | None:
    """
    Extract the token from an Authorization header value.

    The "Bearer" scheme is matched case-insensitively.

    Returns:
        The token, None if the header is absent or uses another scheme,
        or "" for a bearer credential with no token
    """
    if not authorization:
        return None

    scheme, _, credentials = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    return credentials.strip()


def get_user_from_token(db: Session, token: str | None) -> "User | None":
    """
    Resolve a bearer token to a user.

    Args:
        db: Database session
        token: Token without the "Bearer " prefix

    Returns:
        The user the token was issued for, or None if there is no token
        or the user no longer exists

    Raises:
        InvalidTokenError: If a bearer credential is present (even empty)
            but cannot be verified
    """
    if token is None:
        return None

    if not token:
        logger.warning("Empty bearer token")
        raise InvalidTokenError("invalid token")

    payload = decode_token(token)

    try:
        user_id = int(payload["id"])
    except (TypeError, ValueError) as e:
        raise InvalidTokenError("invalid token") from e

    return get_user(db, user_id)


async def get_context(
    connection: HTTPConnection,
    db: Session = Depends(get_db),
) -> GraphQLContext:
    """
    Create GraphQL context for each request.

    Called by Strawberry for every HTTP operation and for each WebSocket
    connection. HTTPConnection covers both, so the Authorization header is
    read from the POST/GET request or from the WebSocket upgrade request.

    Raises:
        HTTPException: 401 for an invalid token on HTTP
        WebSocketException: Policy violation for an invalid token on WebSocket
    """
    token = get_bearer_token(connection.headers.get("Authorization"))

    try:
        current_user = get_user_from_token(db, token)
    except InvalidTokenError:
        logger.info(f"Rejected invalid bearer token on {connection.url.path}")
        if isinstance(connection, WebSocket):
            raise WebSocketException(
                code=status.WS_1008_POLICY_VIOLATION,
                reason="invalid token",
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return GraphQLContext(db=db, current_user=current_user)
