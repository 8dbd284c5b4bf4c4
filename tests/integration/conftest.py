import pytest_asyncio
from fastapi import Depends
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from tests.fixtures.tenant_directory import FakeTenantDirectory
from tenant_access.depends import get_current_user, get_tenant_directory, get_unit_of_work
from tenant_access.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tenant_access.api.utils.jwt import create_access_token


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
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
async def app(engine):
    from tenant_access.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_unit_of_work():
        async with Session() as session:
            yield SqlAlchemyUnitOfWork(session)

    def override_get_tenant_directory(current_user: dict = Depends(get_current_user)):
        return FakeTenantDirectory(
            TestDataLoader.tenants(), TestDataLoader.user(current_user["user_id"])
        )

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_tenant_directory] = override_get_tenant_directory
    yield app
    await app.state.http_client.aclose()


@pytest_asyncio.fixture
async def client(app):
    from httpx import ASGITransport

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
def auth_headers():
    def make(user_id: str, session_id: str = None) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id, session_id)}"}

    return make
