"""
Role level table

Static rank and capability defaults per role level, plus the permission-name
vocabularies that map onto capabilities.
"""

from typing import Dict, FrozenSet, Optional

from tenant_access.domain.entities.enums import Capability, RoleLevel

ROLE_LEVEL_RANKS: Dict[RoleLevel, int] = {
    RoleLevel.GUEST: 1,
    RoleLevel.USER: 2,
    RoleLevel.MANAGER: 3,
    RoleLevel.ADMIN: 4,
    RoleLevel.SUPER_ADMIN: 5,
}

ROLE_LEVEL_CAPABILITIES: Dict[RoleLevel, FrozenSet[Capability]] = {
    RoleLevel.SUPER_ADMIN: frozenset(Capability),
    RoleLevel.ADMIN: frozenset(
        {
            Capability.ACCESS_MANAGER,
            Capability.ACCESS_USERS,
            Capability.ACCESS_ROLES,
            Capability.ACCESS_SETTINGS,
        }
    ),
    RoleLevel.MANAGER: frozenset({Capability.ACCESS_MANAGER, Capability.ACCESS_USERS}),
    RoleLevel.USER: frozenset(),
    RoleLevel.GUEST: frozenset(),
}

# Granular permission names that switch a capability on regardless of level
PERMISSION_CAPABILITIES: Dict[str, Capability] = {
    "access_manager": Capability.ACCESS_MANAGER,
    "manage_tenants": Capability.ACCESS_TENANTS,
    "manage_users": Capability.ACCESS_USERS,
    "manage_roles": Capability.ACCESS_ROLES,
    "manage_settings": Capability.ACCESS_SETTINGS,
}

# Names a guarded page may require on top of its route rule
REQUIRED_PERMISSION_CAPABILITIES: Dict[str, Capability] = {
    **PERMISSION_CAPABILITIES,
    "super_admin": Capability.SUPER_ADMIN,
    "core_super_admin": Capability.CORE_SUPER_ADMIN,
}


def parse_role_level(level) -> Optional[RoleLevel]:
    if isinstance(level, RoleLevel):
        return level
    if not isinstance(level, str):
        return None
    try:
        return RoleLevel(level)
    except ValueError:
        return None


def role_rank(level) -> int:
    """Rank of a level string, 0 when unknown."""
    parsed = parse_role_level(level)
    if parsed is None:
        return 0
    return ROLE_LEVEL_RANKS[parsed]


def capabilities_for_level(level) -> FrozenSet[Capability]:
    parsed = parse_role_level(level)
    if parsed is None:
        return frozenset()
    return ROLE_LEVEL_CAPABILITIES[parsed]
