"""
Check Route Access Use Case

Answers whether the session's role context lets it navigate to a path.
"""

from tenant_access.app.services.tenant_context_store import TenantContextStore
from tenant_access.domain.route_policy import RoutePolicy


class CheckRouteAccessUseCase:
    """
    Business Rules:
    - No role context denies every path
    - Paths without a rule are public
    """

    def __init__(self, store: TenantContextStore, policy: RoutePolicy):
        self.store = store
        self.policy = policy

    async def execute(self, path: str) -> bool:
        context = await self.store.get_current_role_context()
        if context is None:
            return False
        return self.policy.allows(path, context.effective_permissions)
