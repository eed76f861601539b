import os

# must be set before todoapp.config is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CREATE_TABLES"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from todoapp.main import app
from todoapp.database import Base, get_db
from todoapp.models import todo, user  # noqa: F401
from todoapp.schemas.user import UserCreate
from todoapp.services.todo_service import TodoService
from todoapp.services.user_service import UserService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine():
    # fresh in-memory database per test; StaticPool keeps it on one connection
    engine_test = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine_test
    await engine_test.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def user_service():
    return UserService()


@pytest.fixture
def todo_service():
    return TodoService()


@pytest.fixture
async def alice(db, user_service):
    return await user_service.register_user(
        db, UserCreate(username="alice_99", email="Alice@Example.com", password="secret123")
    )


@pytest.fixture
async def bob(db, user_service):
    return await user_service.register_user(
        db, UserCreate(username="bob", email="bob@example.com", password="hunter22")
    )
