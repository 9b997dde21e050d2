"""
JWT token handling for authentication.

This module provides functionality for:
- Signing tokens for a subject and a set of claims
- Verifying tokens and returning their claims
"""
import os
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

import jwt
from jwt.exceptions import PyJWTError

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 30))


class InvalidToken(Exception):
    """Raised when a token is malformed, expired or signed with another secret."""


def sign(
    subject: str,
    claims: Dict[str, Any],
    secret: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed JWT for a subject.

    Args:
        subject: Value stored in the ``sub`` claim
        claims: Additional payload data to include in the token
        secret: Symmetric signing secret
        expires_delta: Custom lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT token string

    Raises:
        ValueError: If the secret is blank
    """
    if not secret:
        raise ValueError("JWT secret is not configured")

    issued_at = datetime.now(timezone.utc)
    expires = issued_at + (
        expires_delta if expires_delta is not None
        else timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = dict(claims)
    to_encode.update({"sub": subject, "iat": issued_at, "exp": expires})
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def verify(token: str, secret: str) -> Dict[str, Any]:
    """
    Verify a JWT token and return its payload.

    Args:
        token: JWT token string
        secret: The secret the token was signed with

    Returns:
        The decoded claims, including ``sub``, ``iat`` and ``exp``

    Raises:
        InvalidToken: If the signature, structure or expiry is invalid
        ValueError: If the secret is blank
    """
    if not secret:
        raise ValueError("JWT secret is not configured")

    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": ["sub", "iat", "exp"]},
        )
    except PyJWTError as e:
        raise InvalidToken(str(e)) from e
