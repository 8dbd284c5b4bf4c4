"""
Use Cases

Organized into domain folders:
- context/: Tenant switching and the session's role context
- access/: Route access decisions
"""

from .access import (
    CheckRouteAccessUseCase,
    GuardRouteUseCase,
    ResolveLandingRouteUseCase,
)
from .context import (
    ClearRoleContextUseCase,
    GetRoleContextUseCase,
    ListSwitchableTenantsUseCase,
    RefreshRoleContextUseCase,
    SwitchTenantUseCase,
)

__all__ = [
    # Context
    "SwitchTenantUseCase",
    "GetRoleContextUseCase",
    "RefreshRoleContextUseCase",
    "ClearRoleContextUseCase",
    "ListSwitchableTenantsUseCase",
    # Access
    "CheckRouteAccessUseCase",
    "GuardRouteUseCase",
    "ResolveLandingRouteUseCase",
]
