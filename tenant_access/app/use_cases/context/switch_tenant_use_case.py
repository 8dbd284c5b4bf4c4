"""
Switch Tenant Use Case

Switches the session into a tenant and derives the role context the UI runs
with there, including super-admin impersonation and the return to CORE.
"""

import logging
from typing import Optional

from libs.result import Error, Result, Return
from tenant_access.app.services.event_bus import (
    TENANT_CHANGED,
    TENANT_EXPERIENCE_LOADED,
    TENANT_SWITCHED,
    EventBus,
)
from tenant_access.app.services.permission_evaluator import (
    calculate_effective_permissions,
    granted_capability_names,
)
from tenant_access.app.services.tenant_context_store import TenantContextStore
from tenant_access.app.services.tenant_directory import ITenantDirectory, UpstreamApiError
from tenant_access.app.use_cases.context.dtos import CoreTenant
from tenant_access.domain.entities import (
    EffectivePermissions,
    RoleLevel,
    RoleSnapshot,
    Tenant,
    TenantRoleContext,
    TenantSnapshot,
    TenantType,
)
from tenant_access.domain.role_resolution import Resolved, default_user_role

logger = logging.getLogger(__name__)

CORE_PRIMARY_COLOR = "#000000"


class SwitchTenantUseCase:
    """
    Use case for switching tenant with role inheritance.

    Business Rules:
    - Regular users get the capabilities of their role in the target tenant
    - A missing assignment resolves to the default USER role with no permissions
    - Super admins returning to CORE always get full access, no role lookup
    - Super admins entering any other tenant impersonate it through the
      privileged switch endpoint and get only that tenant's role capabilities
    - Switches of one session are serialized in the order they were started
    - Nothing is stored until every lookup has succeeded
    """

    def __init__(
        self,
        directory: ITenantDirectory,
        store: TenantContextStore,
        events: EventBus,
        core_tenant: Optional[CoreTenant] = None,
    ):
        self.directory = directory
        self.store = store
        self.events = events
        self.core_tenant = core_tenant or CoreTenant()

    async def execute(self, user_id: str, target_tenant_id: str) -> Result[TenantRoleContext]:
        """
        Execute switch tenant use case.

        Args:
            user_id: Acting user ID
            target_tenant_id: Tenant to switch into

        Returns:
            Result with the new TenantRoleContext, or Error

        Raises:
            UpstreamApiError: the privileged switch or a required lookup failed
        """
        async with self.store.switch_lock:
            return await self._switch(user_id, target_tenant_id)

    async def execute_for_current_tenant(self, user_id: str) -> Result[TenantRoleContext]:
        """Re-run the switch for the tenant the session is in, read under the switch lock."""
        async with self.store.switch_lock:
            current_tenant = await self.store.get_current_tenant()
            if current_tenant is None:
                return Return.err(Error("NO_CURRENT_TENANT", "No current tenant to refresh"))
            return await self._switch(user_id, current_tenant.id)

    async def _switch(self, user_id: str, target_tenant_id: str) -> Result[TenantRoleContext]:
        is_super_admin = await self.directory.is_current_user_super_admin()

        if not is_super_admin:
            return await self._switch_as_member(user_id, target_tenant_id)

        core = await self._find_core_tenant(target_tenant_id)
        if core is not None:
            return Return.ok(await self._restore_core(user_id, target_tenant_id, core))

        return Return.ok(await self._impersonate(user_id, target_tenant_id))

    async def _switch_as_member(
        self, user_id: str, target_tenant_id: str
    ) -> Result[TenantRoleContext]:
        tenant = await self.directory.get_tenant(target_tenant_id)
        if tenant is None:
            return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

        role, resolved = await self._resolve_role(target_tenant_id)
        context = TenantRoleContext(
            tenant_id=tenant.id,
            tenant_name=tenant.name,
            tenant_slug=tenant.slug,
            user_id=user_id,
            user_role=role,
            is_super_admin_original=False,
            is_currently_impersonating=False,
            effective_permissions=calculate_effective_permissions(role, False),
            assignment_resolved=resolved,
        )
        await self._commit(_snapshot(tenant), context)
        return Return.ok(context)

    async def _find_core_tenant(self, tenant_id: str) -> Optional[Tenant]:
        """Return the tenant when it is CORE, None otherwise (including lookup failure)."""
        try:
            tenant = await self.directory.get_tenant(tenant_id)
        except UpstreamApiError as exc:
            logger.warning(f"Could not check whether tenant {tenant_id} is core: {exc.message}")
            return None

        if tenant is None:
            if tenant_id != self.core_tenant.id:
                return None
            tenant = Tenant(
                id=tenant_id,
                name=self.core_tenant.name,
                slug=self.core_tenant.slug,
                type=TenantType.CORE,
            )

        if not tenant.is_core(self.core_tenant.id, self.core_tenant.slug):
            return None
        return tenant

    async def _restore_core(
        self, user_id: str, tenant_id: str, core: Tenant
    ) -> TenantRoleContext:
        context = TenantRoleContext(
            tenant_id=tenant_id,
            tenant_name=self.core_tenant.name,
            tenant_slug=self.core_tenant.slug,
            user_id=user_id,
            user_role=RoleSnapshot(
                id="super-admin",
                name="Super Admin",
                level=RoleLevel.SUPER_ADMIN.value,
                permissions=[],
            ),
            is_super_admin_original=True,
            is_currently_impersonating=False,
            effective_permissions=EffectivePermissions.full_access(),
        )
        tenant = TenantSnapshot(
            id=tenant_id,
            name=self.core_tenant.name,
            slug=self.core_tenant.slug,
            type=TenantType.CORE.value,
            primary_color=CORE_PRIMARY_COLOR,
            settings=core.settings,
        )
        await self._commit(tenant, context)
        return context

    async def _impersonate(self, user_id: str, tenant_id: str) -> TenantRoleContext:
        switched = await self.directory.switch_as_super_admin(tenant_id)

        role, resolved = await self._resolve_role(tenant_id)
        context = TenantRoleContext(
            tenant_id=switched.id,
            tenant_name=switched.name,
            tenant_slug=switched.slug,
            user_id=user_id,
            user_role=role,
            is_super_admin_original=True,
            is_currently_impersonating=True,
            effective_permissions=calculate_effective_permissions(role, True),
            assignment_resolved=resolved,
        )
        await self._commit(_snapshot(switched), context)
        return context

    async def _resolve_role(self, tenant_id: str):
        resolution = await self.directory.get_user_role_in_tenant(tenant_id)
        if isinstance(resolution, Resolved):
            return resolution.role, True

        logger.info(
            f"No role assignment in tenant {tenant_id} ({resolution.reason}), using default role"
        )
        return default_user_role(), False

    async def _commit(self, tenant: TenantSnapshot, context: TenantRoleContext) -> None:
        await self.store.commit_switch(tenant, context)

        logger.info(
            f"Session {self.store.session_id} switched to tenant {context.tenant_slug} "
            f"(impersonating={context.is_currently_impersonating}, "
            f"capabilities={list(granted_capability_names(context.effective_permissions))})"
        )

        session_id = self.store.session_id
        await self.events.emit(
            TENANT_CHANGED, session_id, tenant.model_dump(by_alias=True)
        )
        await self.events.emit(
            TENANT_SWITCHED,
            session_id,
            {
                "tenantId": context.tenant_id,
                "tenantSlug": context.tenant_slug,
                "tenantName": context.tenant_name,
                "isCurrentlyImpersonating": context.is_currently_impersonating,
            },
        )
        await self.events.emit(
            TENANT_EXPERIENCE_LOADED,
            session_id,
            {
                "tenantId": context.tenant_id,
                "effectivePermissions": context.effective_permissions.model_dump(by_alias=True),
            },
        )


def _snapshot(tenant: Tenant) -> TenantSnapshot:
    return TenantSnapshot(
        id=tenant.id,
        name=tenant.name,
        slug=tenant.slug,
        type=tenant.type.value if tenant.type is not None else None,
        primary_color=tenant.primary_color,
        settings=tenant.settings,
    )
