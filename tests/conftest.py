import os
from datetime import date

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from roster.core.security import create_access_token
from roster.database import Base, get_db
from roster.dependencies import get_today
from roster.main import app
from roster.models.driver import Driver
from roster.models.user import Role, User
from roster.services.drafts import InMemoryDraftStore
from roster.services.settings_store import SettingsRegistry, SqlSettingsBackend
from roster.utils.password import hash_password

TODAY = date(2025, 3, 14)
PASSWORD = "correct-horse"


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'roster.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    saved_state = {
        name: getattr(app.state, name)
        for name in ("session_factory", "draft_store", "settings_registry")
    }
    registry = SettingsRegistry(SqlSettingsBackend(session_factory), delay=0.01)
    app.state.session_factory = session_factory
    app.state.draft_store = InMemoryDraftStore()
    app.state.settings_registry = registry
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    await registry.aclose()
    app.dependency_overrides.clear()
    for name, value in saved_state.items():
        setattr(app.state, name, value)


async def create_user(db, email, role=Role.STANDARD, full_name="Test User", is_active=True):
    user = User(
        email=email,
        full_name=full_name,
        hashed_password=hash_password(PASSWORD),
        role=role.value,
        is_active=is_active,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


@pytest.fixture
async def user(db):
    return await create_user(db, "operator@fleet.com", full_name="Operator One")


@pytest.fixture
async def admin(db):
    return await create_user(db, "admin@fleet.com", role=Role.ADMINISTRATOR, full_name="Admin One")


@pytest.fixture
def headers(user):
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
async def driver(db):
    driver = Driver(name="Carlos Pereira", cpf="52998224725", admission_date=date(2020, 5, 4))
    db.add(driver)
    await db.commit()
    await db.refresh(driver)
    return driver
