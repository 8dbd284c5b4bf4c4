"""
Tenant Context Use Case DTOs (Data Transfer Objects)

Shared values and response classes for the tenant context domain.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from pydantic import BaseModel


@dataclass(frozen=True)
class CoreTenant:
    """Identity of the system tenant super admins return to"""

    id: str = "core"
    slug: str = "system-core"
    name: str = "System Core"


# ============================================================================
# Response DTOs
# ============================================================================


class PendingEventsResponse(BaseModel):
    """Notifications queued for the session since the last poll"""

    events: List[Dict[str, Any]]
