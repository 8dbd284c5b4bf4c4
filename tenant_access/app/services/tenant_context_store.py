"""
Tenant context store.

Session-scoped holder of the active tenant and role context. The in-memory
copy on SessionState is authoritative; session storage only lets the context
survive a restart. Unreadable stored values are deleted and treated as absent.
"""

import asyncio
import logging
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from tenant_access.app.services.session_state import SessionState
from tenant_access.app.services.unit_of_work import UnitOfWork
from tenant_access.domain.entities import TenantRoleContext, TenantSnapshot

logger = logging.getLogger(__name__)

ROLE_CONTEXT_KEY = "tenantRoleContext"
CURRENT_TENANT_KEY = "currentTenant"

ModelT = TypeVar("ModelT", bound=BaseModel)


class TenantContextStore:
    def __init__(self, session: SessionState, uow: UnitOfWork):
        self.session = session
        self.uow = uow

    @property
    def session_id(self) -> str:
        return self.session.session_id

    @property
    def switch_lock(self) -> asyncio.Lock:
        return self.session.switch_lock

    async def _load(self, key: str, model: Type[ModelT]) -> Optional[ModelT]:
        async with self.uow:
            raw = await self.uow.storage.get(self.session_id, key)
            if raw is None:
                return None
            try:
                return model.model_validate_json(raw)
            except ValidationError:
                logger.warning(
                    f"Discarding unreadable {key} for session {self.session_id}"
                )
                await self.uow.storage.remove(self.session_id, key)
                await self.uow.commit()
                return None

    @staticmethod
    def _dump(value: BaseModel) -> str:
        return value.model_dump_json(by_alias=True)

    # Role context

    async def get_current_role_context(self) -> Optional[TenantRoleContext]:
        if self.session.role_context is not None:
            return self.session.role_context

        context = await self._load(ROLE_CONTEXT_KEY, TenantRoleContext)
        if context is not None:
            self.session.role_context = context
        return context

    async def save_role_context(self, context: TenantRoleContext) -> None:
        self.session.role_context = context
        async with self.uow:
            await self.uow.storage.set(self.session_id, ROLE_CONTEXT_KEY, self._dump(context))
            await self.uow.commit()

    async def clear_role_context(self) -> None:
        self.session.role_context = None
        async with self.uow:
            await self.uow.storage.remove(self.session_id, ROLE_CONTEXT_KEY)
            await self.uow.commit()

    # Current tenant

    async def get_current_tenant(self) -> Optional[TenantSnapshot]:
        if self.session.current_tenant is not None:
            return self.session.current_tenant

        tenant = await self._load(CURRENT_TENANT_KEY, TenantSnapshot)
        if tenant is not None:
            self.session.current_tenant = tenant
        return tenant

    async def set_current_tenant(self, tenant: Optional[TenantSnapshot]) -> None:
        self.session.current_tenant = tenant
        async with self.uow:
            if tenant is None:
                await self.uow.storage.remove(self.session_id, CURRENT_TENANT_KEY)
                logger.info(f"Cleared current tenant for session {self.session_id}")
            else:
                await self.uow.storage.set(
                    self.session_id, CURRENT_TENANT_KEY, self._dump(tenant)
                )
                logger.info(f"Set current tenant to {tenant.slug} for session {self.session_id}")
            await self.uow.commit()

    async def commit_switch(self, tenant: TenantSnapshot, context: TenantRoleContext) -> None:
        """Persist the tenant and its role context together."""
        async with self.uow:
            await self.uow.storage.set(self.session_id, CURRENT_TENANT_KEY, self._dump(tenant))
            await self.uow.storage.set(self.session_id, ROLE_CONTEXT_KEY, self._dump(context))
            await self.uow.commit()

        self.session.current_tenant = tenant
        self.session.role_context = context

    async def clear(self) -> None:
        """Forget tenant and role context (logout)."""
        self.session.role_context = None
        self.session.current_tenant = None
        async with self.uow:
            await self.uow.storage.remove_session(self.session_id)
            await self.uow.commit()
