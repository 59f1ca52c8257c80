"""
Security Service

Handles password hashing and bearer token operations.

Security Features:
==================
1. Password hashing with bcrypt (passlib), one salt per user
2. JWT signing and verification (python-jose, HS256)

Tokens carry the claims ``{"username": ..., "id": ...}``. They only
expire when ACCESS_TOKEN_EXPIRE_MINUTES is configured.

Usage:
    from library_api.services.security import create_access_token, decode_token

    token = create_access_token(user)
    payload = decode_token(token)  # raises InvalidTokenError if forged
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from jose import JWTError, jwt
from passlib.context import CryptContext

from library_api.config import get_settings

if TYPE_CHECKING:
    from library_api.models.user import User

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# bcrypt generates a fresh salt for every hash, so two users with the
# same password still get different hashes
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class InvalidTokenError(Exception):
    """Raised when a bearer token fails signature or structure checks."""

    pass


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hashed = hash_password("secret")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Uses constant-time comparison to prevent timing attacks.

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# JWT Token Configuration
# -------------------------------------------------------------------------
ALGORITHM = "HS256"


def create_access_token(
    user: "User",
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed token identifying a user.

    Args:
        user: The user the token is issued for
        expires_delta: Optional lifetime; defaults to the configured
            ACCESS_TOKEN_EXPIRE_MINUTES, or no expiry when that is unset

    Returns:
        Encoded JWT token string
    """
    to_encode = {"username": user.username, "id": str(user.id)}

    if expires_delta is None and settings.access_token_expire_minutes:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    if expires_delta is not None:
        to_encode["exp"] = datetime.now(UTC) + expires_delta

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=ALGORITHM,
    )


def decode_token(token: str) -> dict:
    """
    Decode and validate a token.

    Unlike an absent token, a token that is present but cannot be verified
    is an error: the caller must reject the whole request.

    Args:
        token: The JWT token string (without the "Bearer " prefix)

    Returns:
        Decoded payload with at least ``id`` and ``username``

    Raises:
        InvalidTokenError: If the signature, expiry or claims are invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise InvalidTokenError("invalid token") from e

    if not payload.get("id") or not payload.get("username"):
        logger.warning("Token is missing the id or username claim")
        raise InvalidTokenError("invalid token")

    return payload
