"""
HTTP tenant directory.

Reads tenant and role data from the platform REST API on behalf of the acting
user. Every response uses the envelope ``{"success", "message", "data"}``.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from tenant_access.app.services.tenant_directory import (
    ITenantDirectory,
    Pagination,
    TenantPage,
    UpstreamApiError,
)
from tenant_access.domain.entities import Tenant, TenantStatus, TenantType
from tenant_access.domain.entities.tenant_role_context import RoleSnapshot
from tenant_access.domain.role_resolution import NotAssigned, Resolved, RoleResolution

logger = logging.getLogger(__name__)


def create_http_client(base_url: str, timeout: float) -> httpx.AsyncClient:
    """Shared client for all directory instances of the application."""
    return httpx.AsyncClient(base_url=base_url, timeout=timeout)


def _enum_or_default(enum_cls, value, default=None):
    try:
        return enum_cls(value)
    except ValueError:
        return default


def parse_tenant(data: Any) -> Tenant:
    """Build a Tenant from an API record; raises UpstreamApiError on a malformed one."""
    if not isinstance(data, dict) or not isinstance(data.get("id"), (str, int)):
        raise UpstreamApiError("Tenant API returned an unexpected body")
    try:
        return Tenant(
            id=str(data["id"]),
            name=data.get("name") or "",
            slug=data.get("slug") or "",
            type=_enum_or_default(TenantType, data.get("type")),
            status=_enum_or_default(TenantStatus, data.get("status"), TenantStatus.ACTIVE),
            primary_color=data.get("primaryColor"),
            theme=data.get("theme"),
            settings=data.get("settings") or {},
            feature_flags=data.get("featureFlags") or {},
        )
    except ValidationError as exc:
        raise UpstreamApiError(f"Tenant API returned an invalid tenant: {exc.error_count()} error(s)") from exc


def parse_role(data: Dict[str, Any]) -> RoleSnapshot:
    permissions = []
    raw_permissions = data.get("permissions")
    for permission in raw_permissions if isinstance(raw_permissions, list) else []:
        if isinstance(permission, str):
            permissions.append(permission)
        elif isinstance(permission, dict):
            # Role-permission links nest the permission object
            nested = permission.get("permission")
            name = permission.get("name") or (nested.get("name") if isinstance(nested, dict) else None)
            if isinstance(name, str):
                permissions.append(name)

    level = data.get("level")
    name = data.get("name")
    return RoleSnapshot(
        id=str(data.get("id") or ""),
        name=name if isinstance(name, str) else "",
        level=level if isinstance(level, str) else "",
        permissions=permissions,
    )


class HttpTenantDirectory(ITenantDirectory):
    """Tenant directory backed by the platform REST API"""

    def __init__(self, client: httpx.AsyncClient, access_token: str):
        self.client = client
        self.access_token = access_token

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.access_token}"}
        try:
            response = await self.client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise UpstreamApiError(f"{method} {url} failed: {exc}") from exc

        if response.status_code >= 400:
            raise UpstreamApiError(
                _message(response) or f"{method} {url} returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamApiError(f"{method} {url} returned invalid JSON") from exc

        if not isinstance(payload, dict):
            raise UpstreamApiError(f"{method} {url} returned an unexpected body")
        return payload

    async def is_current_user_super_admin(self) -> bool:
        try:
            payload = await self._request("GET", "/tenants/super-admin/check-status")
        except UpstreamApiError as exc:
            logger.warning(f"Error checking super admin status: {exc.message}")
            return False

        data = payload.get("data") or {}
        return bool(data.get("isSuperAdmin", False))

    async def get_tenant(self, tenant_id: str) -> Optional[Tenant]:
        try:
            payload = await self._request("GET", f"/tenants/{tenant_id}")
        except UpstreamApiError as exc:
            if exc.status_code == 404:
                return None
            raise

        data = payload.get("data")
        if not payload.get("success", True) or not isinstance(data, dict):
            return None
        return parse_tenant(data)

    async def get_user_role_in_tenant(self, tenant_id: str) -> RoleResolution:
        try:
            payload = await self._request("GET", f"/tenants/{tenant_id}/user-role")
        except UpstreamApiError as exc:
            logger.warning(f"Error getting user role in tenant {tenant_id}: {exc.message}")
            return NotAssigned(reason=exc.message)

        data = payload.get("data")
        if not payload.get("success") or not isinstance(data, dict):
            return NotAssigned(reason=payload.get("message") or "no assignment in tenant")
        return Resolved(parse_role(data))

    async def switch_as_super_admin(self, tenant_id: str) -> Tenant:
        payload = await self._request(
            "POST", "/tenants/super-admin/switch", json={"tenantId": tenant_id}
        )
        data = payload.get("data")
        if not payload.get("success") or not isinstance(data, dict):
            raise UpstreamApiError(payload.get("message") or "Super admin switch refused")
        return parse_tenant(data)

    async def list_tenants_for_super_admin(
        self, page: int = 1, limit: int = 20, search: Optional[str] = None
    ) -> TenantPage:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if search:
            params["search"] = search

        payload = await self._request("GET", "/tenants/super-admin/all-tenants", params=params)
        if not payload.get("success"):
            raise UpstreamApiError(payload.get("message") or "Tenant listing refused")

        data = payload.get("data")
        if not isinstance(data, dict):
            raise UpstreamApiError("Tenant listing returned an unexpected body")
        items = data.get("items") or []
        pagination = data.get("pagination") or {}
        if not isinstance(items, list) or not isinstance(pagination, dict):
            raise UpstreamApiError("Tenant listing returned an unexpected body")
        try:
            return TenantPage(
                items=[parse_tenant(item) for item in items],
                pagination=Pagination(
                    current_page=pagination.get("currentPage", page),
                    total_pages=pagination.get("totalPages", 1),
                    total_items=pagination.get("totalItems", 0),
                    items_per_page=pagination.get("itemsPerPage", limit),
                    has_next_page=pagination.get("hasNextPage", False),
                    has_previous_page=pagination.get("hasPreviousPage", False),
                ),
            )
        except ValidationError as exc:
            raise UpstreamApiError("Tenant listing returned an unexpected body") from exc


def _message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    message = body.get("message") or body.get("error")
    return message if isinstance(message, str) else None
