"""
Test cases for the user store adapters.
"""
import asyncio
import os
import uuid

import pytest

from neoflix.auth.errors import ConstraintViolation, NotFound
from neoflix.auth.store import InMemoryUserStore, SQLAlchemyUserStore

# Check if we should skip database tests
SKIP_DB_TESTS = os.getenv("SKIP_DB_TESTS", "true").lower() == "true"
SKIP_REASON = "Database tests require a PostgreSQL server (set SKIP_DB_TESTS=false)"


@pytest.mark.asyncio
async def test_memory_create_and_find():
    store = InMemoryUserStore()
    created = await store.create_user("a@example.com", "hashed", "Alice")

    assert set(created) == {"userId", "email", "name"}
    assert uuid.UUID(created["userId"])
    assert created["email"] == "a@example.com"

    found = await store.find_user_by_email("a@example.com")
    assert found["userId"] == created["userId"]
    assert found["password"] == "hashed"


@pytest.mark.asyncio
async def test_memory_unique_email():
    store = InMemoryUserStore()
    await store.create_user("a@example.com", "hashed", "Alice")

    with pytest.raises(ConstraintViolation) as exc_info:
        await store.create_user("a@example.com", "other", "Bob")
    assert exc_info.value.field == "email"

    found = await store.find_user_by_email("a@example.com")
    assert found["name"] == "Alice"
    assert len(store) == 1


@pytest.mark.asyncio
async def test_memory_find_missing():
    store = InMemoryUserStore()
    with pytest.raises(NotFound):
        await store.find_user_by_email("nobody@example.com")


@pytest.mark.asyncio
async def test_memory_concurrent_creates_one_wins():
    store = InMemoryUserStore()
    results = await asyncio.gather(
        *[store.create_user("race@example.com", "hashed", f"User {i}") for i in range(10)],
        return_exceptions=True
    )
    successes = [r for r in results if isinstance(r, dict)]
    failures = [r for r in results if isinstance(r, ConstraintViolation)]
    assert len(successes) == 1
    assert len(failures) == 9


@pytest.mark.asyncio
async def test_memory_find_returns_copy():
    store = InMemoryUserStore()
    await store.create_user("a@example.com", "hashed", "Alice")
    found = await store.find_user_by_email("a@example.com")
    found["name"] = "Mallory"
    assert (await store.find_user_by_email("a@example.com"))["name"] == "Alice"


@pytest.mark.skipif(SKIP_DB_TESTS, reason=SKIP_REASON)
@pytest.mark.asyncio
async def test_database_store_lifecycle():
    from sqlalchemy import delete

    from neoflix.base_microservice import Base, create_session_factory
    from neoflix.auth.models import User
    from neoflix.config import get_settings

    engine, session_factory = create_session_factory(get_settings().database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        store = SQLAlchemyUserStore(session_factory)
        email = f"dbtest_{uuid.uuid4().hex}@example.com"

        created = await store.create_user(email, "hashed", "Db User")
        assert created["email"] == email

        with pytest.raises(ConstraintViolation):
            await store.create_user(email, "other", "Someone Else")

        found = await store.find_user_by_email(email)
        assert found["userId"] == created["userId"]
        assert found["password"] == "hashed"

        with pytest.raises(NotFound):
            await store.find_user_by_email(f"missing_{email}")

        # Clean up - delete test user
        async with session_factory() as session:
            await session.execute(delete(User).where(User.email == email))
            await session.commit()
    finally:
        await engine.dispose()
