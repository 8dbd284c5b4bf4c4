"""
Tenant Context Use Cases

Tenant switching and the role context that results from it.
"""

from .clear_role_context_use_case import ClearRoleContextUseCase
from .dtos import CoreTenant, PendingEventsResponse
from .get_role_context_use_case import GetRoleContextUseCase
from .list_switchable_tenants_use_case import ListSwitchableTenantsUseCase
from .refresh_role_context_use_case import RefreshRoleContextUseCase
from .switch_tenant_use_case import SwitchTenantUseCase

__all__ = [
    "SwitchTenantUseCase",
    "GetRoleContextUseCase",
    "RefreshRoleContextUseCase",
    "ClearRoleContextUseCase",
    "ListSwitchableTenantsUseCase",
    "CoreTenant",
    "PendingEventsResponse",
]
