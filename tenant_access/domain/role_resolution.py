"""
Role resolution outcome

A role lookup inside a tenant either finds the user's role or finds that the
user holds no assignment there.
"""

from dataclasses import dataclass
from typing import Union

from tenant_access.domain.entities.enums import RoleLevel
from tenant_access.domain.entities.tenant_role_context import RoleSnapshot


@dataclass(frozen=True)
class Resolved:
    role: RoleSnapshot


@dataclass(frozen=True)
class NotAssigned:
    reason: str = "no assignment in tenant"


RoleResolution = Union[Resolved, NotAssigned]


def default_user_role() -> RoleSnapshot:
    """Minimal role used when the user holds no assignment in a tenant."""
    return RoleSnapshot(
        id="default-user", name="User", level=RoleLevel.USER.value, permissions=[]
    )
