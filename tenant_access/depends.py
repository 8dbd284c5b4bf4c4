from typing import AsyncIterator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from tenant_access.adapter.services.http_tenant_directory import HttpTenantDirectory
from tenant_access.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tenant_access.api.utils.jwt import verify_jwt
from tenant_access.app.services.event_bus import EventBus
from tenant_access.app.services.session_state import SessionRegistry, SessionState
from tenant_access.app.services.tenant_context_store import TenantContextStore
from tenant_access.app.services.tenant_directory import ITenantDirectory
from tenant_access.app.services.unit_of_work import UnitOfWork
from tenant_access.domain.route_policy import RoutePolicy

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing user_id and session_id

    Raises:
        HTTPException: 401 if token is invalid, expired or has no user_id
    """
    payload = verify_jwt(credentials.credentials)

    if payload is None or not payload.get("user_id"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload


async def get_session_state(
    request: Request, current_user: dict = Depends(get_current_user)
) -> AsyncIterator[SessionState]:
    session_id = current_user.get("session_id") or current_user["user_id"]
    sessions: SessionRegistry = request.app.state.sessions
    state = sessions.acquire(session_id)
    try:
        yield state
    finally:
        sessions.release(state)


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_context_store(
    session: SessionState = Depends(get_session_state),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> TenantContextStore:
    return TenantContextStore(session, uow)


def get_tenant_directory(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> ITenantDirectory:
    return HttpTenantDirectory(request.app.state.http_client, credentials.credentials)


def get_event_bus(request: Request) -> EventBus:
    return request.app.state.events


def get_route_policy(request: Request) -> RoutePolicy:
    return request.app.state.route_policy
