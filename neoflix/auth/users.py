"""
User authentication service.

This module provides functionality for:
- User registration
- User authentication
- Resolving the user behind a token
"""
import asyncio
import logging
from datetime import timedelta
from typing import Optional, Dict, Any

from pydantic import BaseModel, EmailStr, Field

from neoflix.auth import jwt
from neoflix.auth.errors import ConstraintViolation, DuplicateEmail, NotFound, ValidationError
from neoflix.auth.passwords import PasswordHasher
from neoflix.auth.store import UserStore

logger = logging.getLogger("microservice.auth")


# Pydantic models for request validation
class UserCreate(BaseModel):
    """Model for user registration."""
    email: EmailStr
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class UserLogin(BaseModel):
    """Model for user login."""
    email: EmailStr
    password: str


class AuthService:
    """
    Register and authenticate users against a UserStore.

    The store, the JWT secret and the password hasher are injected once at
    construction; every call is independent.
    """

    def __init__(
        self,
        store: UserStore,
        jwt_secret: str,
        hasher: Optional[PasswordHasher] = None,
        expires_delta: Optional[timedelta] = None
    ):
        self.store = store
        self.jwt_secret = jwt_secret
        self.hasher = hasher or PasswordHasher()
        self.expires_delta = expires_delta

    async def register(self, email: str, plain_password: str, name: str) -> Dict[str, Any]:
        """
        Create a new user and sign a token for it.

        Args:
            email: Unique email address
            plain_password: Password in plain text, stored hashed
            name: Display name

        Returns:
            Public user view: token, userId, email and name

        Raises:
            DuplicateEmail: If an account already uses the email
        """
        # bcrypt is CPU-bound; keep it off the event loop
        encrypted = await asyncio.to_thread(self.hasher.hash, plain_password)
        try:
            user = await self.store.create_user(email, encrypted, name)
        except ConstraintViolation as e:
            if e.field == "email":
                raise DuplicateEmail(email) from e
            raise

        logger.debug("Created user %s", user["userId"])
        return self.user_with_token(user, self._sign(user))

    async def authenticate(self, email: str, plain_password: str) -> Dict[str, Any]:
        """
        Verify a user's credentials and sign a token for them.

        Args:
            email: The user's email address
            plain_password: An attempt at the user's password

        Returns:
            Public user view: token, userId, email and name

        Raises:
            ValidationError: On an unknown email or a wrong password
        """
        try:
            user = await self.store.find_user_by_email(email)
        except NotFound as e:
            raise ValidationError("Incorrect email", {"email": "Incorrect email"}) from e

        if not await asyncio.to_thread(self.hasher.verify, plain_password, user.get("password")):
            raise ValidationError("Incorrect password", {"password": "Incorrect password"})

        return self.user_with_token(user, self._sign(user))

    def current_user(self, token: str) -> Dict[str, Any]:
        """Verify a token and return the user identity it carries."""
        claims = jwt.verify(token, self.jwt_secret)
        return self.claims_to_user(claims)

    def _sign(self, user: Dict[str, Any]) -> str:
        return jwt.sign(
            user["userId"],
            self.user_to_claims(user),
            self.jwt_secret,
            expires_delta=self.expires_delta
        )

    @staticmethod
    def user_to_claims(user: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "sub": user["userId"],
            "userId": user["userId"],
            "name": user["name"],
        }

    @staticmethod
    def claims_to_user(claims: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "userId": claims["sub"],
            "name": claims.get("name"),
        }

    @staticmethod
    def user_with_token(user: Dict[str, Any], token: str) -> Dict[str, Any]:
        # Never include the password hash
        return {
            "token": token,
            "userId": user["userId"],
            "email": user["email"],
            "name": user["name"],
        }
