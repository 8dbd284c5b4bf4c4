"""
Permission Entity

A resource/action/scope grant that roles carry.
"""

from typing import Optional

from sqlmodel import Field, SQLModel

from .enums import PermissionScope


class Permission(SQLModel):
    """
    Permission entity - uniquely named resource:action grant.

    Business Rules:
    - (resource, action, scope) identifies the grant
    - System permissions cannot be removed from the catalogue
    """

    id: str
    name: str
    resource: str
    action: str
    scope: Optional[PermissionScope] = Field(default=PermissionScope.TENANT)

    description: Optional[str] = None
    category: Optional[str] = None
    is_system_permission: bool = False

    @property
    def key(self) -> str:
        return f"{self.resource}:{self.action}"
