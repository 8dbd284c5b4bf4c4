"""
Tenant Access Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class RoleLevel(str, Enum):
    """Ordered role rank, lowest to highest"""

    GUEST = "GUEST"
    USER = "USER"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class RoleType(str, Enum):
    """Role origin"""

    SYSTEM = "SYSTEM"
    TENANT = "TENANT"
    CUSTOM = "CUSTOM"


class PermissionScope(str, Enum):
    """Reach of a granted permission"""

    OWN = "OWN"
    TENANT = "TENANT"
    ALL = "ALL"


class AssignmentStatus(str, Enum):
    """User-role assignment status"""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
    EXPIRED = "EXPIRED"
    ARCHIVED = "ARCHIVED"


class TenantType(str, Enum):
    """Tenant category; CORE is the system tenant"""

    CORE = "CORE"
    BUSINESS = "BUSINESS"
    STARTUP = "STARTUP"
    ENTERPRISE = "ENTERPRISE"
    RETAIL = "RETAIL"
    TRIAL = "TRIAL"


class TenantStatus(str, Enum):
    """Tenant status"""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"
    SUSPENDED = "SUSPENDED"


class Capability(str, Enum):
    """Effective permission flags; values are EffectivePermissions field names"""

    ACCESS_MANAGER = "can_access_manager"
    ACCESS_TENANTS = "can_access_tenants"
    ACCESS_USERS = "can_access_users"
    ACCESS_ROLES = "can_access_roles"
    ACCESS_SETTINGS = "can_access_settings"
    SUPER_ADMIN = "is_super_admin"
    CORE_SUPER_ADMIN = "is_core_super_admin"
