"""
Clear Role Context Use Case

Logout: forgets the session's tenant and role context.
"""

import logging
from typing import Optional

from libs.result import Result, Return
from tenant_access.app.services.session_state import SessionRegistry
from tenant_access.app.services.tenant_context_store import TenantContextStore

logger = logging.getLogger(__name__)


class ClearRoleContextUseCase:
    def __init__(self, store: TenantContextStore, sessions: Optional[SessionRegistry] = None):
        self.store = store
        self.sessions = sessions

    async def execute(self) -> Result[None]:
        # Wait for an in-flight switch so it cannot re-store a context after logout
        async with self.store.switch_lock:
            await self.store.clear()
            if self.sessions is not None:
                self.sessions.discard(self.store.session_id)
        logger.info(f"Cleared tenant context for session {self.store.session_id}")
        return Return.ok()
