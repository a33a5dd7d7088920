"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from tracklog.app.main import app
from tracklog.app.core.config import settings
from tracklog.app.core.jwt import create_access_token
from tracklog.app.core.security import get_password_hash
from tracklog.app.db.session import get_db, Base
from tracklog.app.core.redis_client import get_redis
from tracklog.app.domain.geo import from_timestamp
from tracklog.app.models.position import Position
from tracklog.app.models.track import Track
from tracklog.app.models.user import User
from tracklog.app.schemas.config import AppConfig
from tracklog.app.services.config_service import config_cache
import tracklog.app.core.redis_client as redis_client_module

# Satisfies the default policy: 10+ chars, mixed case and a digit
PASSWORD = "Secret-pass1"

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Event handler to enable foreign keys for SQLite
from sqlalchemy import event
from sqlalchemy.pool import Pool

@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self.expiry = {}

    async def ping(self):
        return True

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, key):
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def exists(self, key):
        return 1 if key in self.store else 0

    async def flushdb(self):
        self.store = {}
        self.expiry = {}

# Redis Fixture (Session Scope)
@pytest.fixture(scope="session")
async def redis_client_session():
    return MockRedis()

@pytest.fixture(scope="session", autouse=True)
def apply_overrides(redis_client_session):
    """Apply overrides once for the session."""
    original_client = redis_client_module.redis_client
    redis_client_module.redis_client = redis_client_session

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    async def override_get_redis():
        return redis_client_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    yield

    app.dependency_overrides = {}
    redis_client_module.redis_client = original_client

@pytest.fixture(autouse=True)
async def setup_database(redis_client_session):
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await redis_client_session.flushdb()
    config_cache.invalidate()

    yield

    config_cache.invalidate()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Keep uploaded images inside the test's temp folder."""
    folder = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(folder))
    return folder

@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session

@pytest.fixture
def set_config():
    """Replace the cached settings for the current test."""
    def _set(**changes):
        config = AppConfig(**changes)
        config_cache.set(config)
        return config
    return _set

@pytest.fixture
def add_user(db_session):
    async def _add(login, password=PASSWORD, is_admin=False):
        user = User(login=login, password=get_password_hash(password), is_admin=is_admin)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _add

@pytest.fixture
def add_track(db_session):
    async def _add(user, name="Morning ride", comment=None):
        track = Track(user_id=user.id, name=name, comment=comment)
        db_session.add(track)
        await db_session.commit()
        await db_session.refresh(track)
        return track
    return _add

@pytest.fixture
def add_position(db_session):
    async def _add(track, timestamp, latitude, longitude, **fields):
        position = Position(
            user_id=track.user_id,
            track_id=track.id,
            time=from_timestamp(timestamp),
            latitude=latitude,
            longitude=longitude,
            **fields
        )
        db_session.add(position)
        await db_session.commit()
        await db_session.refresh(position)
        return position
    return _add

@pytest.fixture
def headers_for():
    """Bearer headers for a user, as issued by a login."""
    def _headers(user):
        token = create_access_token(data={"sub": user.login, "user_id": user.id, "is_admin": user.is_admin})
        return {"Authorization": f"Bearer {token}"}
    return _headers

@pytest.fixture
async def admin(add_user):
    return await add_user("admin", is_admin=True)

@pytest.fixture
async def alice(add_user):
    return await add_user("alice")

@pytest.fixture
async def bob(add_user):
    return await add_user("bob")

@pytest.fixture
def script_db(monkeypatch):
    """Point the command line scripts at the test database."""
    import tracklog.import_cli
    import tracklog.setup_db
    for module in (tracklog.import_cli, tracklog.setup_db):
        monkeypatch.setattr(module, "AsyncSessionLocal", TestingSessionLocal)
        monkeypatch.setattr(module, "engine", engine)
