"""
Authentication models for Neoflix.

The users table backs SQLAlchemyUserStore. Email uniqueness is enforced by
the database so concurrent registrations cannot both succeed.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime

from neoflix.base_microservice import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """User model for authentication."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    def to_public(self) -> dict:
        """Identity fields safe to hand back to callers."""
        return {"userId": self.user_id, "email": self.email, "name": self.name}

    def to_record(self) -> dict:
        """Public fields plus the stored password hash."""
        return {**self.to_public(), "password": self.password}
