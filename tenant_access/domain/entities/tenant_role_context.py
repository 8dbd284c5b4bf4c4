"""
Tenant Role Context

Derived snapshot of what the acting user may do in the active tenant.
Serialized with camelCase keys, the shape the UI reads.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import Capability


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EffectivePermissions(CamelModel):
    """Final capability flags after combining role level and granular grants"""

    can_access_manager: bool = False
    can_access_tenants: bool = False
    can_access_users: bool = False
    can_access_roles: bool = False
    can_access_settings: bool = False
    is_super_admin: bool = False
    is_core_super_admin: bool = False

    @classmethod
    def full_access(cls) -> "EffectivePermissions":
        return cls(**{capability.value: True for capability in Capability})

    def has(self, capability: Capability) -> bool:
        return getattr(self, capability.value)

    def grant(self, capability: Capability) -> None:
        setattr(self, capability.value, True)


class RoleSnapshot(CamelModel):
    """Role as resolved for one tenant; permissions are permission names"""

    id: str
    name: str
    level: str
    permissions: List[str] = Field(default_factory=list)


class TenantSnapshot(CamelModel):
    """Active tenant as remembered for the session"""

    id: str
    name: str
    slug: str
    type: Optional[str] = None
    primary_color: Optional[str] = None
    settings: dict = Field(default_factory=dict)


class TenantRoleContext(CamelModel):
    """
    Result of a tenant switch.

    Business Rules:
    - Created fresh on every switch, never merged with a previous context
    - is_currently_impersonating implies is_super_admin_original
    - assignment_resolved is False when user_role is the default minimal role
      substituted for a missing assignment
    """

    tenant_id: str
    tenant_name: str
    tenant_slug: str
    user_id: str
    user_role: RoleSnapshot
    is_super_admin_original: bool = False
    is_currently_impersonating: bool = False
    effective_permissions: EffectivePermissions = Field(
        default_factory=EffectivePermissions
    )
    assignment_resolved: bool = True
