"""
List Switchable Tenants Use Case

Tenants a super admin may switch into, paged by the upstream API.
"""

from typing import Optional

from libs.result import Error, Result, Return
from tenant_access.app.services.tenant_directory import ITenantDirectory, TenantPage


class ListSwitchableTenantsUseCase:
    """
    Business Rules:
    - Only super admins can list every tenant
    - page >= 1 and 1 <= limit <= 100
    """

    MAX_LIMIT = 100

    def __init__(self, directory: ITenantDirectory):
        self.directory = directory

    async def execute(
        self, page: int = 1, limit: int = 20, search: Optional[str] = None
    ) -> Result[TenantPage]:
        if page < 1 or limit < 1 or limit > self.MAX_LIMIT:
            return Return.err(
                Error("INVALID_PAGINATION", f"page must be >= 1 and limit between 1 and {self.MAX_LIMIT}")
            )

        if not await self.directory.is_current_user_super_admin():
            return Return.err(Error("NOT_SUPER_ADMIN", "Only super admins can list all tenants"))

        tenants = await self.directory.list_tenants_for_super_admin(page, limit, search or None)
        return Return.ok(tenants)
