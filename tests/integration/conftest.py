import bcrypt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from recovery_register.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from recovery_register.app.services.auth_settings import AuthSettings
from recovery_register.depends import get_auth_settings, get_unit_of_work
from recovery_register.domain.entities import ADMIN_ROLES, Identity, Role, SecurityProfile
from tests.fixtures.json_loader import TestDataLoader
from tests.utils.session_cookie import COOKIE_NAME


@pytest.fixture
def test_data():
    return TestDataLoader()


@pytest.fixture
def auth_settings():
    return AuthSettings(
        environment="test",
        session_secret="integration-test-secret",
        session_cookie_name=COOKIE_NAME,
        bcrypt_rounds=10,
    )


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session, auth_settings):
    from recovery_register.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_auth_settings] = lambda: auth_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def create_identity(db_session):
    """Insert an identity directly, e.g. an admin that cannot self-register."""

    async def _create(username, password, role="user", email=None):
        role = Role(role)
        identity = Identity(
            username=username,
            email=email,
            password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt(10)).decode(),
            is_anonymous=email is None,
            role=role,
            security_profile=SecurityProfile.admin if role in ADMIN_ROLES else SecurityProfile.basic,
        )
        db_session.add(identity)
        await db_session.commit()
        await db_session.refresh(identity)
        return identity

    return _create
