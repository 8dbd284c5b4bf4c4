"""
Tenant Access Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    AssignmentStatus,
    Capability,
    PermissionScope,
    RoleLevel,
    RoleType,
    TenantStatus,
    TenantType,
)

# Export all entities
from .permission import Permission
from .role import Role
from .tenant import Tenant
from .user_assignment import UserAssignment, UserProfile
from .stored_value import StoredValue
from .tenant_role_context import (
    EffectivePermissions,
    RoleSnapshot,
    TenantRoleContext,
    TenantSnapshot,
)

__all__ = [
    # Enums
    "AssignmentStatus",
    "Capability",
    "PermissionScope",
    "RoleLevel",
    "RoleType",
    "TenantStatus",
    "TenantType",
    # Entities
    "Permission",
    "Role",
    "Tenant",
    "UserAssignment",
    "UserProfile",
    "StoredValue",
    # Derived context
    "EffectivePermissions",
    "RoleSnapshot",
    "TenantRoleContext",
    "TenantSnapshot",
]
