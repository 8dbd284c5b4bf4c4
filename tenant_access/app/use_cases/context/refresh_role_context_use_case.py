"""
Refresh Role Context Use Case

Re-derives the role context for the tenant the session is already in, used
after permissions changed upstream.
"""

from libs.result import Result
from tenant_access.app.use_cases.context.switch_tenant_use_case import SwitchTenantUseCase
from tenant_access.domain.entities import TenantRoleContext


class RefreshRoleContextUseCase:
    """
    Business Rules:
    - Only a session with a current tenant can refresh (NO_CURRENT_TENANT)
    - The current tenant is read under the switch lock, so a logout that
      ran first is never undone by the refresh
    """

    def __init__(self, switch_tenant: SwitchTenantUseCase):
        self.switch_tenant = switch_tenant

    async def execute(self, user_id: str) -> Result[TenantRoleContext]:
        return await self.switch_tenant.execute_for_current_tenant(user_id)
