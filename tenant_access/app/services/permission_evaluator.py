"""
Effective permission computation.

Level defaults come from the role level table; granular permission names can
only add capabilities on top of them.
"""

from typing import Any, Iterable, List, Mapping, Optional, Union

from tenant_access.domain.entities import EffectivePermissions, RoleSnapshot
from tenant_access.domain.role_levels import (
    PERMISSION_CAPABILITIES,
    REQUIRED_PERMISSION_CAPABILITIES,
    capabilities_for_level,
)

RoleLike = Union[RoleSnapshot, Mapping[str, Any], None]


def _role_field(role: RoleLike, name: str) -> Any:
    if role is None:
        return None
    if isinstance(role, Mapping):
        return role.get(name)
    return getattr(role, name, None)


def _permission_names(permissions: Any) -> List[str]:
    if not isinstance(permissions, (list, tuple)):
        return []
    names = []
    for permission in permissions:
        if isinstance(permission, str):
            names.append(permission)
        elif isinstance(permission, Mapping) and isinstance(permission.get("name"), str):
            names.append(permission["name"])
    return names


def calculate_effective_permissions(
    role: RoleLike, is_original_super_admin: bool = False
) -> EffectivePermissions:
    """
    Compute capability flags for a role resolved in one tenant.

    Args:
        role: Role snapshot or raw role mapping (level + permission names)
        is_original_super_admin: Whether the session started as a super admin.
            Never elevates flags: an impersonating super admin gets exactly
            the capabilities of the role resolved in the target tenant.

    Returns:
        EffectivePermissions, all-false for missing or malformed role data
    """
    permissions = EffectivePermissions()

    for capability in capabilities_for_level(_role_field(role, "level")):
        permissions.grant(capability)

    for name in _permission_names(_role_field(role, "permissions")):
        capability = PERMISSION_CAPABILITIES.get(name)
        if capability is not None:
            permissions.grant(capability)

    return permissions


def has_required_permission(
    context_permissions: Optional[EffectivePermissions], permission: str
) -> bool:
    """Check a page-level required permission name; unknown names do not restrict."""
    if context_permissions is None:
        return False
    capability = REQUIRED_PERMISSION_CAPABILITIES.get(permission)
    if capability is None:
        return True
    return context_permissions.has(capability)


def granted_capability_names(permissions: EffectivePermissions) -> Iterable[str]:
    return [name for name, value in permissions.model_dump().items() if value]
