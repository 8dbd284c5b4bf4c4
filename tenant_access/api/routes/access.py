from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel, Field

from tenant_access.app.services.event_bus import EventBus
from tenant_access.app.services.tenant_context_store import TenantContextStore
from tenant_access.app.use_cases.access import (
    CheckRouteAccessUseCase,
    GuardDecision,
    GuardRouteUseCase,
    ResolveLandingRouteUseCase,
)
from tenant_access.depends import get_context_store, get_event_bus, get_route_policy
from tenant_access.domain.route_policy import RoutePolicy

router = APIRouter(prefix="/access", tags=["Access"])


class RouteAccessResponse(BaseModel):
    path: str
    allowed: bool


class GuardRouteRequest(BaseModel):
    """Navigation the UI is about to perform"""

    path: str = Field(..., min_length=1, description="Route path being entered")
    required_permission: Optional[str] = Field(
        None, description="Page-level permission name, e.g. manage_users"
    )
    fallback_path: Optional[str] = Field(
        None, description="Where to send the user when the route is denied"
    )


class LandingRouteResponse(BaseModel):
    path: str


@router.get("/route", status_code=status.HTTP_200_OK, response_model=RouteAccessResponse)
async def can_access_route(
    path: str = Query(..., min_length=1),
    store: TenantContextStore = Depends(get_context_store),
    policy: RoutePolicy = Depends(get_route_policy),
):
    """Whether the session's role context allows navigating to path."""
    allowed = await CheckRouteAccessUseCase(store, policy).execute(path)
    return RouteAccessResponse(path=path, allowed=allowed)


@router.post("/guard", status_code=status.HTTP_200_OK, response_model=GuardDecision)
async def guard_route(
    request: Request,
    body: GuardRouteRequest,
    store: TenantContextStore = Depends(get_context_store),
    policy: RoutePolicy = Depends(get_route_policy),
    events: EventBus = Depends(get_event_bus),
):
    """
    Route wrapper decision: render, redirect to fallback with an error toast,
    or redirect to login.
    """
    use_case = GuardRouteUseCase(
        store,
        policy,
        events,
        fallback_path=request.app.state.fallback_path,
        login_path=request.app.state.login_path,
    )
    return await use_case.execute(body.path, body.required_permission, body.fallback_path)


@router.get("/landing", status_code=status.HTTP_200_OK, response_model=LandingRouteResponse)
async def landing_route(
    request: Request,
    store: TenantContextStore = Depends(get_context_store),
):
    """First page the session may open given its permissions."""
    use_case = ResolveLandingRouteUseCase(store, login_path=request.app.state.login_path)
    return LandingRouteResponse(path=await use_case.execute())
