"""
Get Role Context Use Case

Loads the session's current role context.
"""

from libs.result import Error, Result, Return
from tenant_access.app.services.tenant_context_store import TenantContextStore
from tenant_access.domain.entities import TenantRoleContext


class GetRoleContextUseCase:
    """
    Use case for reading the current role context.

    Business Rules:
    - In-memory context wins over stored context
    - A corrupted stored context is dropped and reported as missing
    """

    def __init__(self, store: TenantContextStore):
        self.store = store

    async def execute(self) -> Result[TenantRoleContext]:
        context = await self.store.get_current_role_context()
        if context is None:
            return Return.err(Error("NO_ROLE_CONTEXT", "No tenant has been selected"))
        return Return.ok(context)
