"""
Role Entity

Named bundle of permissions with a rank.
"""

from datetime import datetime
from typing import List, Optional

from sqlmodel import Field, SQLModel

from .enums import RoleLevel, RoleType
from .permission import Permission


class Role(SQLModel):
    """
    Role entity - ranked, optionally tenant-owned set of permissions.

    Business Rules:
    - level is kept as the raw string the API sent; unknown levels rank 0
    - SYSTEM roles are global, TENANT/CUSTOM roles belong to tenant_id
    - Soft delete: deleted_at moves the role to trash, permanent delete is explicit
    """

    id: str
    name: str
    description: Optional[str] = None

    level: str = Field(default=RoleLevel.USER.value)
    type: RoleType = Field(default=RoleType.TENANT)
    tenant_id: Optional[str] = None
    is_active: bool = True

    permissions: List[Permission] = Field(default_factory=list)

    deleted_at: Optional[datetime] = None

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None

    def permission_names(self) -> List[str]:
        return [permission.name for permission in self.permissions]
