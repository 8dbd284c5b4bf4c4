import pytest
from httpx import AsyncClient
from sqlmodel import select

from tenant_access.domain.entities import StoredValue
from tests.utils.json_compare import exclude_keys


@pytest.mark.asyncio
async def test_super_admin_switch_to_core(client: AsyncClient, auth_headers):
    """Super admin returning to CORE

    Given a platform super admin
    When they switch to the CORE tenant
    Then every capability is granted and they are not impersonating
    """
    response = await client.post(
        "/tenant-context/switch", json={"tenant_id": "core"}, headers=auth_headers("u-super")
    )

    assert response.status_code == 200
    context = response.json()
    assert context["tenantSlug"] == "system-core"
    assert context["isSuperAdminOriginal"] is True
    assert context["isCurrentlyImpersonating"] is False
    assert all(context["effectivePermissions"].values())

    tenant = await client.get("/tenant-context/current-tenant", headers=auth_headers("u-super"))
    assert tenant.json()["primaryColor"] == "#000000"


@pytest.mark.asyncio
async def test_super_admin_impersonates_tenant_without_role(client: AsyncClient, auth_headers):
    """Super admin entering a tenant where they hold no role

    Then they impersonate it with the default USER role and no manager access
    """
    response = await client.post(
        "/tenant-context/switch", json={"tenant_id": "t-acme"}, headers=auth_headers("u-super")
    )

    assert response.status_code == 200
    context = response.json()
    assert context["isCurrentlyImpersonating"] is True
    assert context["assignmentResolved"] is False
    assert context["userRole"]["level"] == "USER"
    assert not any(context["effectivePermissions"].values())


@pytest.mark.asyncio
async def test_super_admin_impersonating_uses_tenant_role(client: AsyncClient, auth_headers):
    response = await client.post(
        "/tenant-context/switch", json={"tenant_id": "t-globex"}, headers=auth_headers("u-super")
    )

    assert response.status_code == 200
    permissions = response.json()["effectivePermissions"]
    assert exclude_keys(permissions, {"canAccessTenants", "isSuperAdmin", "isCoreSuperAdmin"}) == {
        "canAccessManager": True,
        "canAccessUsers": True,
        "canAccessRoles": True,
        "canAccessSettings": True,
    }
    assert permissions["canAccessTenants"] is False
    assert permissions["isSuperAdmin"] is False


@pytest.mark.asyncio
async def test_manager_switch(client: AsyncClient, auth_headers):
    """Regular MANAGER inherits manager capabilities only"""
    response = await client.post(
        "/tenant-context/switch", json={"tenant_id": "t-globex"}, headers=auth_headers("u-manager")
    )

    assert response.status_code == 200
    context = response.json()
    assert context["tenantName"] == "Globex"
    assert context["isSuperAdminOriginal"] is False
    assert context["effectivePermissions"]["canAccessManager"] is True
    assert context["effectivePermissions"]["canAccessUsers"] is True
    assert context["effectivePermissions"]["canAccessTenants"] is False


@pytest.mark.asyncio
async def test_member_switch_without_assignment(client: AsyncClient, auth_headers):
    response = await client.post(
        "/tenant-context/switch", json={"tenant_id": "t-globex"}, headers=auth_headers("u-member")
    )

    assert response.status_code == 200
    assert response.json()["userRole"]["id"] == "default-user"
    assert response.json()["assignmentResolved"] is False


@pytest.mark.asyncio
async def test_switch_to_unknown_tenant(client: AsyncClient, auth_headers):
    response = await client.post(
        "/tenant-context/switch", json={"tenant_id": "t-nope"}, headers=auth_headers("u-manager")
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "TENANT_NOT_FOUND"


@pytest.mark.asyncio
async def test_super_admin_switch_refused_upstream(client: AsyncClient, auth_headers):
    """A refused privileged switch surfaces as a gateway error and keeps nothing"""
    response = await client.post(
        "/tenant-context/switch", json={"tenant_id": "t-nope"}, headers=auth_headers("u-super")
    )

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "UPSTREAM_UNAVAILABLE"

    context = await client.get("/tenant-context", headers=auth_headers("u-super"))
    assert context.status_code == 404


@pytest.mark.asyncio
async def test_switch_requires_tenant_id(client: AsyncClient, auth_headers):
    response = await client.post(
        "/tenant-context/switch", json={"tenant_id": "  "}, headers=auth_headers("u-manager")
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TENANT_ID"


@pytest.mark.asyncio
async def test_switch_requires_token(client: AsyncClient):
    response = await client.post("/tenant-context/switch", json={"tenant_id": "t-globex"})

    assert response.status_code in (401, 403)


@pytest.mark.asyncio
async def test_switch_rejects_invalid_token(client: AsyncClient):
    response = await client.post(
        "/tenant-context/switch",
        json={"tenant_id": "t-globex"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_switch_is_persisted_for_the_session(client: AsyncClient, auth_headers, db_session):
    """Tenant and role context are written to session storage together"""
    await client.post(
        "/tenant-context/switch",
        json={"tenant_id": "t-globex"},
        headers=auth_headers("u-manager", "browser-1"),
    )

    result = await db_session.exec(
        select(StoredValue).where(StoredValue.session_id == "browser-1")
    )
    keys = sorted(row.key for row in result.all())
    assert keys == ["currentTenant", "tenantRoleContext"]


@pytest.mark.asyncio
async def test_super_admin_returns_to_core_after_impersonating(client: AsyncClient, auth_headers):
    """Super admin leaving an impersonated tenant

    Given a super admin impersonating t-acme
    When the same session switches back to CORE
    Then full access is restored and the stored context is no longer impersonating
    """
    headers = auth_headers("u-super", "browser-7")
    impersonating = await client.post(
        "/tenant-context/switch", json={"tenant_id": "t-acme"}, headers=headers
    )
    assert impersonating.json()["isCurrentlyImpersonating"] is True

    response = await client.post("/tenant-context/switch", json={"tenant_id": "core"}, headers=headers)

    assert response.status_code == 200
    context = response.json()
    assert context["tenantId"] == "core"
    assert context["isCurrentlyImpersonating"] is False
    assert all(context["effectivePermissions"].values())

    stored = await client.get("/tenant-context", headers=headers)
    assert stored.status_code == 200
    assert stored.json() == context
