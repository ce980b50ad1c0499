"""
CampusNet - Test Configuration and Fixtures
"""
import os
import tempfile
from typing import AsyncGenerator, Callable, Awaitable, Dict, Any
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import update
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment before the app reads its settings
_TEST_DIR = tempfile.mkdtemp(prefix="campusnet-tests-")
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'test.db')}"
INTERNAL_TOKEN = "test-internal-token"

os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = TEST_DATABASE_URL
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['UPLOAD_DIR'] = os.path.join(_TEST_DIR, 'uploads')
os.environ['INTERNAL_API_TOKEN'] = INTERNAL_TOKEN

from campusnet.main import app
from campusnet.core.database import Base, get_db, enable_sqlite_foreign_keys
from campusnet.models.user import User, UserRole

fake = Faker()

# Test database setup
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
enable_sqlite_foreign_keys(test_engine)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)

DEFAULT_PASSWORD = "secret1"


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


def fake_registration(**overrides) -> Dict[str, Any]:
    data = {
        "name": fake.name(),
        "email": fake.unique.email(),
        "username": fake.unique.user_name().replace("-", "_"),
        "password": DEFAULT_PASSWORD,
    }
    data.update(overrides)
    return data


@pytest.fixture
def registration() -> Callable[..., Dict[str, Any]]:
    """Factory for valid registration payloads"""
    return fake_registration


@pytest.fixture
def make_user(client: AsyncClient) -> Callable[..., Awaitable[Dict[str, Any]]]:
    """
    Register and log in a user through the API.

    Returns plain values (id, username, token, headers) rather than ORM
    objects so tests never touch expired instances.
    """
    async def _make_user(**overrides) -> Dict[str, Any]:
        data = fake_registration(**overrides)
        response = await client.post("/register", json=data)
        assert response.status_code == 201, response.text

        response = await client.post(
            "/login",
            json={"identifier": data["username"], "password": data["password"]}
        )
        assert response.status_code == 200, response.text
        body = response.json()
        return {
            "id": body["user"]["id"],
            "name": body["user"]["name"],
            "username": body["user"]["username"],
            "email": body["user"]["email"],
            "token": body["token"],
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return _make_user


@pytest.fixture
async def test_user(make_user) -> Dict[str, Any]:
    return await make_user()


@pytest.fixture
async def other_user(make_user) -> Dict[str, Any]:
    return await make_user()


@pytest.fixture
async def admin_user(make_user, db_session: AsyncSession) -> Dict[str, Any]:
    """A user promoted to admin after login; the token still says member"""
    user = await make_user()
    await db_session.execute(
        update(User).where(User.id == user["id"]).values(role=UserRole.ADMIN)
    )
    await db_session.commit()
    return user


@pytest.fixture
def auth_headers(test_user: Dict[str, Any]) -> dict:
    return test_user["headers"]


@pytest.fixture
def internal_headers() -> dict:
    return {"X-Internal-Token": INTERNAL_TOKEN}
