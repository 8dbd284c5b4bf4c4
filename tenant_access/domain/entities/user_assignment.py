"""
UserAssignment Entity

Links a User to a Role within a Tenant.
"""

from datetime import datetime
from typing import List, Optional

from sqlmodel import Field, SQLModel

from .enums import AssignmentStatus
from .role import Role


class UserAssignment(SQLModel):
    """
    UserAssignment entity - user holds a role inside a tenant.

    Business Rules:
    - Status only changes through explicit activate/suspend
    - expires_at is advisory, nothing transitions an assignment to EXPIRED
    - is_primary is informational; at most one primary per (user, tenant)
      is not enforced here
    """

    id: str
    user_id: str
    tenant_id: Optional[str] = None
    role_id: str
    role: Optional[Role] = None

    status: AssignmentStatus = Field(default=AssignmentStatus.PENDING)
    is_primary: bool = False
    expires_at: Optional[datetime] = None

    # Audit
    assigned_by: Optional[str] = None
    assigned_at: datetime = Field(default_factory=lambda: datetime.utcnow())

    @property
    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ACTIVE

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or datetime.utcnow())

    def activate(self) -> None:
        self.status = AssignmentStatus.ACTIVE

    def suspend(self) -> None:
        self.status = AssignmentStatus.SUSPENDED


class UserProfile(SQLModel):
    """Acting user with the assignments the API returned for them"""

    id: str
    email: str
    name: Optional[str] = None
    assignments: List[UserAssignment] = Field(default_factory=list)
