"""
Guard Route Use Case

Decides what the UI does with a navigation: render, redirect to a fallback
page with an error toast, or send the user back to login.
"""

import logging
from typing import Optional

from tenant_access.app.services.event_bus import SHOW_TOAST, EventBus
from tenant_access.app.services.permission_evaluator import has_required_permission
from tenant_access.app.services.tenant_context_store import TenantContextStore
from tenant_access.app.use_cases.access.dtos import GuardDecision
from tenant_access.domain.route_policy import RoutePolicy

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = "You do not have permission to access this page"


class GuardRouteUseCase:
    """
    Use case backing the UI route wrapper.

    Business Rules:
    - No current tenant: redirect to login
    - Route rule denies: redirect to fallback path and show an error toast
    - Route allowed but a page-level required permission is missing: deny
      without redirecting
    - Any failure while checking: treat as unauthenticated, redirect to login
    """

    def __init__(
        self,
        store: TenantContextStore,
        policy: RoutePolicy,
        events: EventBus,
        fallback_path: str = "/dashboard",
        login_path: str = "/login",
    ):
        self.store = store
        self.policy = policy
        self.events = events
        self.fallback_path = fallback_path
        self.login_path = login_path

    async def execute(
        self,
        path: str,
        required_permission: Optional[str] = None,
        fallback_path: Optional[str] = None,
    ) -> GuardDecision:
        try:
            return await self._decide(path, required_permission, fallback_path or self.fallback_path)
        except Exception:
            logger.exception(f"Error checking route access for {path}")
            return GuardDecision(
                path=path,
                allowed=False,
                redirect_to=self.login_path,
                reason="ACCESS_CHECK_FAILED",
            )

    async def _decide(
        self, path: str, required_permission: Optional[str], fallback_path: str
    ) -> GuardDecision:
        tenant = await self.store.get_current_tenant()
        if tenant is None:
            logger.warning(f"No current tenant for session {self.store.session_id}, redirecting to login")
            return GuardDecision(
                path=path, allowed=False, redirect_to=self.login_path, reason="NO_CURRENT_TENANT"
            )

        context = await self.store.get_current_role_context()
        can_access = context is not None and self.policy.allows(
            path, context.effective_permissions
        )

        if not can_access:
            logger.warning(f"Access denied to route: {path}, redirecting to: {fallback_path}")
            await self.events.emit(
                SHOW_TOAST,
                self.store.session_id,
                {"type": "error", "message": ACCESS_DENIED_MESSAGE},
            )
            return GuardDecision(
                path=path, allowed=False, redirect_to=fallback_path, reason="ROUTE_FORBIDDEN"
            )

        if required_permission and not has_required_permission(
            context.effective_permissions, required_permission
        ):
            return GuardDecision(path=path, allowed=False, reason="MISSING_PERMISSION")

        return GuardDecision(path=path, allowed=True)
