"""
Tenant Entity

Represents an isolated customer/organization namespace.
"""

from typing import Optional

from sqlmodel import Field, SQLModel

from .enums import TenantStatus, TenantType


class Tenant(SQLModel):
    """
    Tenant entity - isolated namespace with its own branding.

    Business Rules:
    - The CORE tenant (type CORE or the configured core slug/id) grants
      full super-admin rights to super admins returning to it
    - settings and feature_flags are free-form JSON owned by the UI
    """

    id: str
    name: str
    slug: str

    type: Optional[TenantType] = None
    status: TenantStatus = Field(default=TenantStatus.ACTIVE)

    # Branding
    primary_color: Optional[str] = None
    theme: Optional[str] = None
    settings: dict = Field(default_factory=dict)
    feature_flags: dict = Field(default_factory=dict)

    def is_core(self, core_id: str, core_slug: str) -> bool:
        return (
            self.type == TenantType.CORE
            or self.slug == core_slug
            or self.id == core_id
        )
