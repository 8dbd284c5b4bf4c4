from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel

from tenant_access.domain.entities import Tenant
from tenant_access.domain.role_resolution import RoleResolution


class UpstreamApiError(Exception):
    """Raised when the tenant/role API cannot be reached or rejects a call"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class Pagination(BaseModel):
    current_page: int = 1
    total_pages: int = 1
    total_items: int = 0
    items_per_page: int = 0
    has_next_page: bool = False
    has_previous_page: bool = False


class TenantPage(BaseModel):
    items: List[Tenant]
    pagination: Pagination


class ITenantDirectory(ABC):
    """Tenant and role data owned by the upstream API, seen by the acting user"""

    @abstractmethod
    async def is_current_user_super_admin(self) -> bool:
        """Capability check for the acting user, False when it cannot be determined"""
        pass

    @abstractmethod
    async def get_tenant(self, tenant_id: str) -> Optional[Tenant]:
        """Get tenant by ID, None when it does not exist"""
        pass

    @abstractmethod
    async def get_user_role_in_tenant(self, tenant_id: str) -> RoleResolution:
        """Resolve the acting user's role inside a tenant"""
        pass

    @abstractmethod
    async def switch_as_super_admin(self, tenant_id: str) -> Tenant:
        """Privileged switch into any tenant; raises UpstreamApiError on refusal"""
        pass

    @abstractmethod
    async def list_tenants_for_super_admin(
        self, page: int = 1, limit: int = 20, search: Optional[str] = None
    ) -> TenantPage:
        """Page through every tenant a super admin may switch to"""
        pass
