"""
Resolve Landing Route Use Case

Picks the page a session should land on after login or a denied navigation.
"""

from tenant_access.app.services.tenant_context_store import TenantContextStore


class ResolveLandingRouteUseCase:
    def __init__(self, store: TenantContextStore, login_path: str = "/login"):
        self.store = store
        self.login_path = login_path

    async def execute(self) -> str:
        context = await self.store.get_current_role_context()
        if context is None:
            return self.login_path

        permissions = context.effective_permissions
        if permissions.can_access_tenants:
            return "/manager/tenants"
        if permissions.can_access_users:
            return "/manager/users"
        return "/dashboard"
