import asyncio

import pytest

from tenant_access.app.services.event_bus import (
    TENANT_CHANGED,
    TENANT_EXPERIENCE_LOADED,
    TENANT_SWITCHED,
)
from tenant_access.app.services.session_state import SessionState
from tenant_access.app.services.tenant_context_store import TenantContextStore
from tenant_access.app.services.tenant_directory import UpstreamApiError
from tenant_access.app.use_cases.context import SwitchTenantUseCase
from tenant_access.domain.entities import Capability, TenantType
from tenant_access.domain.role_resolution import NotAssigned, Resolved
from tests.fixtures.contexts import make_role, make_tenant


@pytest.fixture
def use_case(mock_directory, store, events):
    return SwitchTenantUseCase(mock_directory, store, events)


@pytest.mark.asyncio
async def test_super_admin_returns_to_core_with_full_access(
    use_case, mock_directory, session_state
):
    """Test super admin switching to CORE gets every flag and no impersonation"""
    # Arrange
    mock_directory.is_current_user_super_admin.return_value = True
    mock_directory.get_tenant.return_value = make_tenant("core", "system-core", TenantType.CORE)

    # Act
    result = await use_case.execute("u-admin", "core")

    # Assert
    assert result.is_ok()
    context = result.value
    assert context.is_super_admin_original is True
    assert context.is_currently_impersonating is False
    assert context.tenant_slug == "system-core"
    assert all(context.effective_permissions.has(capability) for capability in Capability)
    assert session_state.current_tenant.primary_color == "#000000"
    mock_directory.switch_as_super_admin.assert_not_called()
    mock_directory.get_user_role_in_tenant.assert_not_called()


@pytest.mark.asyncio
async def test_core_recognised_by_configured_id_when_lookup_finds_nothing(
    use_case, mock_directory
):
    """Test the configured core id counts as CORE even if the API does not know it"""
    mock_directory.is_current_user_super_admin.return_value = True
    mock_directory.get_tenant.return_value = None

    result = await use_case.execute("u-admin", "core")

    assert result.is_ok()
    assert result.value.effective_permissions.is_core_super_admin is True
    mock_directory.switch_as_super_admin.assert_not_called()


@pytest.mark.asyncio
async def test_super_admin_impersonates_tenant_without_assignment(
    use_case, mock_directory, session_state
):
    """Test super admin entering a tenant where they hold no role gets nothing"""
    # Arrange
    acme = make_tenant()
    mock_directory.is_current_user_super_admin.return_value = True
    mock_directory.get_tenant.return_value = acme
    mock_directory.switch_as_super_admin.return_value = acme
    mock_directory.get_user_role_in_tenant.return_value = NotAssigned()

    # Act
    result = await use_case.execute("u-admin", "t-acme")

    # Assert
    assert result.is_ok()
    context = result.value
    assert context.is_super_admin_original is True
    assert context.is_currently_impersonating is True
    assert context.assignment_resolved is False
    assert context.user_role.level == "USER"
    assert context.effective_permissions.can_access_manager is False
    assert context.effective_permissions.is_super_admin is False
    assert session_state.role_context == context
    mock_directory.switch_as_super_admin.assert_called_once_with("t-acme")


@pytest.mark.asyncio
async def test_super_admin_impersonating_gets_tenant_role_only(use_case, mock_directory):
    """Test impersonation uses the role held in the tenant, never super-admin rights"""
    acme = make_tenant()
    mock_directory.is_current_user_super_admin.return_value = True
    mock_directory.get_tenant.return_value = acme
    mock_directory.switch_as_super_admin.return_value = acme
    mock_directory.get_user_role_in_tenant.return_value = Resolved(make_role("ADMIN"))

    result = await use_case.execute("u-admin", "t-acme")

    permissions = result.value.effective_permissions
    assert permissions.can_access_roles is True
    assert permissions.can_access_tenants is False
    assert permissions.is_super_admin is False
    assert result.value.assignment_resolved is True


@pytest.mark.asyncio
async def test_regular_manager_switch(use_case, mock_directory, session_state):
    """Test regular MANAGER gets manager access but not tenant management"""
    # Arrange
    globex = make_tenant("t-globex", "globex")
    mock_directory.get_tenant.return_value = globex
    mock_directory.get_user_role_in_tenant.return_value = Resolved(make_role("MANAGER"))

    # Act
    result = await use_case.execute("u-1", "t-globex")

    # Assert
    assert result.is_ok()
    context = result.value
    assert context.is_super_admin_original is False
    assert context.is_currently_impersonating is False
    assert context.effective_permissions.can_access_manager is True
    assert context.effective_permissions.can_access_users is True
    assert context.effective_permissions.can_access_tenants is False
    assert session_state.current_tenant.slug == "globex"
    mock_directory.switch_as_super_admin.assert_not_called()


@pytest.mark.asyncio
async def test_regular_user_unknown_tenant(use_case, mock_directory, session_state, events):
    """Test switching into a missing tenant fails and stores nothing"""
    mock_directory.get_tenant.return_value = None

    result = await use_case.execute("u-1", "t-missing")

    assert result.is_err()
    assert result.error.code == "TENANT_NOT_FOUND"
    assert session_state.role_context is None
    assert events.received == []


@pytest.mark.asyncio
async def test_regular_user_without_assignment_gets_default_role(use_case, mock_directory):
    mock_directory.get_tenant.return_value = make_tenant()
    mock_directory.get_user_role_in_tenant.return_value = NotAssigned("lookup failed")

    result = await use_case.execute("u-1", "t-acme")

    assert result.value.user_role.id == "default-user"
    assert result.value.assignment_resolved is False
    assert result.value.effective_permissions.can_access_manager is False


@pytest.mark.asyncio
async def test_failed_privileged_switch_propagates_and_keeps_previous_context(
    use_case, mock_directory, session_state, mock_uow, events
):
    """Test a refused super-admin switch raises and leaves the session untouched"""
    # Arrange
    mock_directory.is_current_user_super_admin.return_value = True
    mock_directory.get_tenant.return_value = make_tenant()
    mock_directory.switch_as_super_admin.side_effect = UpstreamApiError("Forbidden", 403)

    # Act
    with pytest.raises(UpstreamApiError):
        await use_case.execute("u-admin", "t-acme")

    # Assert
    assert session_state.role_context is None
    assert session_state.current_tenant is None
    assert mock_uow.storage.values == {}
    assert events.received == []


@pytest.mark.asyncio
async def test_core_lookup_failure_falls_back_to_impersonation(use_case, mock_directory):
    """Test a failing core check is treated as not core"""
    acme = make_tenant()
    mock_directory.is_current_user_super_admin.return_value = True
    mock_directory.get_tenant.side_effect = UpstreamApiError("timeout")
    mock_directory.switch_as_super_admin.return_value = acme
    mock_directory.get_user_role_in_tenant.return_value = NotAssigned()

    result = await use_case.execute("u-admin", "t-acme")

    assert result.value.is_currently_impersonating is True
    mock_directory.switch_as_super_admin.assert_called_once_with("t-acme")


@pytest.mark.asyncio
async def test_switch_emits_tenant_notifications(use_case, mock_directory, events):
    """Test a successful switch emits changed, switched and experience-loaded"""
    mock_directory.get_tenant.return_value = make_tenant()
    mock_directory.get_user_role_in_tenant.return_value = Resolved(make_role("MANAGER"))

    await use_case.execute("u-1", "t-acme")

    assert [event.name for event in events.received] == [
        TENANT_CHANGED,
        TENANT_SWITCHED,
        TENANT_EXPERIENCE_LOADED,
    ]
    assert events.received[0].detail["slug"] == "acme"
    assert events.received[1].detail["tenantId"] == "t-acme"
    assert events.received[2].detail["effectivePermissions"]["canAccessManager"] is True
    assert all(event.session_id == "session-1" for event in events.received)


@pytest.mark.asyncio
async def test_concurrent_switches_commit_in_start_order(
    use_case, mock_directory, session_state
):
    """Test the later switch wins even when the earlier one answers slower"""
    tenants = {"t-slow": make_tenant("t-slow", "slow"), "t-fast": make_tenant("t-fast", "fast")}

    async def get_tenant(tenant_id):
        if tenant_id == "t-slow":
            await asyncio.sleep(0.05)
        return tenants[tenant_id]

    mock_directory.get_tenant.side_effect = get_tenant
    mock_directory.get_user_role_in_tenant.return_value = Resolved(make_role("USER"))

    first = asyncio.create_task(use_case.execute("u-1", "t-slow"))
    second = asyncio.create_task(use_case.execute("u-1", "t-fast"))
    await asyncio.gather(first, second)

    assert session_state.role_context.tenant_id == "t-fast"
    assert session_state.current_tenant.id == "t-fast"


@pytest.mark.asyncio
async def test_return_to_core_after_impersonation_restores_full_access(
    use_case, mock_directory, session_state, mock_uow
):
    """Test leaving an impersonated tenant for CORE drops the impersonation"""
    # Arrange
    tenants = {
        "t-acme": make_tenant(),
        "core": make_tenant("core", "system-core", TenantType.CORE),
    }
    mock_directory.is_current_user_super_admin.return_value = True
    mock_directory.get_tenant.side_effect = lambda tenant_id: tenants.get(tenant_id)
    mock_directory.switch_as_super_admin.return_value = tenants["t-acme"]
    mock_directory.get_user_role_in_tenant.return_value = NotAssigned()
    impersonated = await use_case.execute("u-admin", "t-acme")
    assert impersonated.value.is_currently_impersonating is True

    # Act
    result = await use_case.execute("u-admin", "core")

    # Assert
    context = result.value
    assert context.is_currently_impersonating is False
    assert context.is_super_admin_original is True
    assert context.tenant_id == "core"
    assert all(context.effective_permissions.has(capability) for capability in Capability)
    assert session_state.role_context == context
    assert session_state.current_tenant.id == "core"
    fresh_store = TenantContextStore(SessionState(session_id="session-1"), mock_uow)
    assert await fresh_store.get_current_role_context() == context
    mock_directory.switch_as_super_admin.assert_called_once_with("t-acme")
