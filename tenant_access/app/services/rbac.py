"""
RBAC helpers over a user's role assignments.

Permission strings have the form ``resource:action`` with optional
``:SCOPE:tenantId`` or ``:ALL`` suffixes; ``*`` matches one segment.
"""

from typing import List, Optional

from tenant_access.domain.entities import (
    AssignmentStatus,
    PermissionScope,
    Role,
    RoleLevel,
    RoleType,
    Tenant,
    TenantType,
    UserProfile,
)
from tenant_access.domain.role_levels import role_rank

SYSTEM_ACCESS_LEVELS = (RoleLevel.SUPER_ADMIN.value, RoleLevel.ADMIN.value)


def has_system_access(user: Optional[UserProfile], tenant: Optional[Tenant] = None) -> bool:
    if user is None:
        return False

    if tenant is not None and tenant.type == TenantType.CORE:
        return True

    return any(
        assignment.role is not None
        and assignment.role.type == RoleType.SYSTEM
        and assignment.role.level in SYSTEM_ACCESS_LEVELS
        for assignment in user.assignments
    )


def get_user_effective_permissions(
    user: Optional[UserProfile], tenant_id: Optional[str] = None
) -> List[str]:
    """Flatten granted permissions of the user's ACTIVE assignments."""
    if user is None:
        return []

    permissions = set()
    for assignment in user.assignments:
        if assignment.status != AssignmentStatus.ACTIVE:
            continue
        if tenant_id and assignment.tenant_id != tenant_id:
            continue
        if assignment.role is None:
            continue

        for permission in assignment.role.permissions:
            base = permission.key
            if permission.scope and assignment.tenant_id:
                permissions.add(f"{base}:{permission.scope.value}:{assignment.tenant_id}")
            else:
                permissions.add(base)

            if permission.scope is None or permission.scope == PermissionScope.ALL:
                permissions.add(f"{base}:ALL")

    return sorted(permissions)


def matches_wildcard(pattern: str, permission: str) -> bool:
    pattern_parts = pattern.split(":")
    permission_parts = permission.split(":")
    if len(pattern_parts) != len(permission_parts):
        return False
    return all(
        part == "*" or part == permission_parts[index]
        for index, part in enumerate(pattern_parts)
    )


def can_access_resource(
    user: Optional[UserProfile],
    resource: str,
    action: str,
    tenant: Optional[Tenant] = None,
) -> bool:
    if user is None:
        return False

    if has_system_access(user, tenant):
        return True

    granted = get_user_effective_permissions(user, tenant.id if tenant else None)
    wanted = f"{resource}:{action}"

    if wanted in granted:
        return True

    if any("*" in pattern and matches_wildcard(pattern, wanted) for pattern in granted):
        return True

    if f"{wanted}:ALL" in granted:
        return True

    return tenant is not None and f"{wanted}:TENANT:{tenant.id}" in granted


def can_manage_role(manager_role: Role, target_role: Role) -> bool:
    if manager_role.type == RoleType.SYSTEM:
        return True

    if manager_role.tenant_id != target_role.tenant_id:
        return False

    return role_rank(manager_role.level) > role_rank(target_role.level)


def get_available_roles_for_assignment(
    user: Optional[UserProfile], tenant: Optional[Tenant], roles: List[Role]
) -> List[Role]:
    if user is None or tenant is None:
        return []

    if has_system_access(user, tenant):
        return list(roles)

    return [
        role
        for role in roles
        if role.type != RoleType.SYSTEM
        and role.is_active
        and (role.tenant_id is None or role.tenant_id == tenant.id)
    ]


def _active_role_in_tenant(user: UserProfile, tenant_id: str) -> Optional[Role]:
    for assignment in user.assignments:
        if assignment.tenant_id == tenant_id and assignment.status == AssignmentStatus.ACTIVE:
            return assignment.role
    return None


def can_assign_user_to_role(
    assigning_user: Optional[UserProfile],
    target_user: UserProfile,
    role: Role,
    tenant: Optional[Tenant],
) -> bool:
    if assigning_user is None or tenant is None:
        return False

    if has_system_access(assigning_user, tenant):
        return True

    if role.type == RoleType.SYSTEM:
        return False

    assigner_role = _active_role_in_tenant(assigning_user, tenant.id)
    if assigner_role is None or not can_manage_role(assigner_role, role):
        return False

    # Target must currently rank below the assigner
    target_role = _active_role_in_tenant(target_user, tenant.id)
    if target_role is not None and role_rank(target_role.level) >= role_rank(assigner_role.level):
        return False

    return True
