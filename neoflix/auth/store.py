"""
User store adapters.

AuthService only depends on the UserStore protocol: create a user under a
unique email constraint, and find a user by email. Two adapters are
provided:
- InMemoryUserStore for local runs and tests
- SQLAlchemyUserStore backed by the users table
"""
import asyncio
import uuid
from typing import Any, Dict, Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.future import select

from neoflix.auth.errors import ConstraintViolation, NotFound
from neoflix.auth.models import User


class UserStore(Protocol):
    async def create_user(self, email: str, hashed_password: str, name: str) -> Dict[str, Any]:
        """Return {userId, email, name}; raise ConstraintViolation on a taken email."""
        ...

    async def find_user_by_email(self, email: str) -> Dict[str, Any]:
        """Return {userId, email, name, password}; raise NotFound when missing."""
        ...


def generate_user_id() -> str:
    return str(uuid.uuid4())


class InMemoryUserStore:
    """Process-local store keyed by email."""

    def __init__(self):
        self._users: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def create_user(self, email: str, hashed_password: str, name: str) -> Dict[str, Any]:
        async with self._lock:
            if email in self._users:
                raise ConstraintViolation("email", email)
            user = {
                "userId": generate_user_id(),
                "email": email,
                "name": name,
                "password": hashed_password,
            }
            self._users[email] = user
        return {"userId": user["userId"], "email": email, "name": name}

    async def find_user_by_email(self, email: str) -> Dict[str, Any]:
        user = self._users.get(email)
        if user is None:
            raise NotFound(email)
        return dict(user)

    def __len__(self) -> int:
        return len(self._users)


class SQLAlchemyUserStore:
    """
    Store backed by the users table.

    Each call runs in its own session and transaction.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def create_user(self, email: str, hashed_password: str, name: str) -> Dict[str, Any]:
        async with self.session_factory() as session:
            user = User(
                user_id=generate_user_id(),
                email=email,
                name=name,
                password=hashed_password
            )
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise ConstraintViolation("email", email) from e
            return user.to_public()

    async def find_user_by_email(self, email: str) -> Dict[str, Any]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(User).where(User.email == email)
            )
            user = result.scalar_one_or_none()
            if user is None:
                raise NotFound(email)
            return user.to_record()
