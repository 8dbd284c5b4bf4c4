from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic import BaseModel, Field

from libs.result import Error
from tenant_access.api.error import ClientError, raise_for_error
from tenant_access.app.services.event_bus import EventBus
from tenant_access.app.services.session_state import SessionRegistry, SessionState
from tenant_access.app.services.tenant_context_store import TenantContextStore
from tenant_access.app.services.tenant_directory import ITenantDirectory, TenantPage
from tenant_access.app.use_cases.context import (
    ClearRoleContextUseCase,
    GetRoleContextUseCase,
    ListSwitchableTenantsUseCase,
    PendingEventsResponse,
    RefreshRoleContextUseCase,
    SwitchTenantUseCase,
)
from tenant_access.depends import (
    get_context_store,
    get_current_user,
    get_event_bus,
    get_session_registry,
    get_session_state,
    get_tenant_directory,
)
from tenant_access.domain.entities import TenantRoleContext, TenantSnapshot

router = APIRouter(prefix="/tenant-context", tags=["Tenant Context"])


class SwitchTenantRequest(BaseModel):
    """
    Switch tenant HTTP request payload

    Validates incoming request for switching the session's tenant.
    """

    tenant_id: str = Field(..., description="Target tenant ID to switch to")


def _switch_use_case(
    request: Request,
    directory: ITenantDirectory,
    store: TenantContextStore,
    events: EventBus,
) -> SwitchTenantUseCase:
    return SwitchTenantUseCase(directory, store, events, request.app.state.core_tenant)


@router.post(
    "/switch", status_code=status.HTTP_200_OK, response_model=TenantRoleContext
)
async def switch_tenant(
    request: Request,
    body: SwitchTenantRequest,
    current_user: dict = Depends(get_current_user),
    directory: ITenantDirectory = Depends(get_tenant_directory),
    store: TenantContextStore = Depends(get_context_store),
    events: EventBus = Depends(get_event_bus),
):
    """
    Switch Tenant With Role Inheritance

    Derives the role context for the target tenant and makes it the session's
    current context.

    Raises:
        - 400 Bad Request: Empty tenant_id
        - 401 Unauthorized: Invalid or expired JWT
        - 404 Not Found: TENANT_NOT_FOUND
        - 502 Bad Gateway: Upstream API failure
    """
    tenant_id = body.tenant_id.strip()
    if not tenant_id:
        raise ClientError(
            Error("INVALID_TENANT_ID", "Tenant ID is required"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    use_case = _switch_use_case(request, directory, store, events)
    result = await use_case.execute(current_user["user_id"], tenant_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=TenantRoleContext)
async def get_role_context(store: TenantContextStore = Depends(get_context_store)):
    """
    Current Role Context

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 404 Not Found: NO_ROLE_CONTEXT
    """
    result = await GetRoleContextUseCase(store).execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=TenantRoleContext)
async def refresh_role_context(
    request: Request,
    current_user: dict = Depends(get_current_user),
    directory: ITenantDirectory = Depends(get_tenant_directory),
    store: TenantContextStore = Depends(get_context_store),
    events: EventBus = Depends(get_event_bus),
):
    """
    Re-derive the role context for the current tenant after permission changes.

    Raises:
        - 409 Conflict: NO_CURRENT_TENANT
        - 502 Bad Gateway: Upstream API failure
    """
    use_case = RefreshRoleContextUseCase(
        _switch_use_case(request, directory, store, events)
    )
    result = await use_case.execute(current_user["user_id"])

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_role_context(
    store: TenantContextStore = Depends(get_context_store),
    sessions: SessionRegistry = Depends(get_session_registry),
):
    """Logout: forget the session's tenant, role context and pending notifications."""
    await ClearRoleContextUseCase(store, sessions).execute()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/current-tenant", status_code=status.HTTP_200_OK, response_model=TenantSnapshot
)
async def get_current_tenant(store: TenantContextStore = Depends(get_context_store)):
    tenant = await store.get_current_tenant()
    if tenant is None:
        raise ClientError(
            Error("NO_CURRENT_TENANT", "No tenant has been selected"),
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return tenant


@router.get("/tenants", status_code=status.HTTP_200_OK, response_model=TenantPage)
async def list_switchable_tenants(
    page: int = Query(1),
    limit: int = Query(20),
    search: Optional[str] = Query(None),
    current_user: dict = Depends(get_current_user),
    directory: ITenantDirectory = Depends(get_tenant_directory),
):
    """
    Tenants a super admin can switch into.

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 400 Bad Request: INVALID_PAGINATION
        - 403 Forbidden: NOT_SUPER_ADMIN
    """
    result = await ListSwitchableTenantsUseCase(directory).execute(page, limit, search)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/events", status_code=status.HTTP_200_OK, response_model=PendingEventsResponse)
async def drain_events(session: SessionState = Depends(get_session_state)):
    """Notifications for this session since the last poll, oldest first."""
    events = session.drain_events()
    return PendingEventsResponse(events=[event.to_dict() for event in events])
