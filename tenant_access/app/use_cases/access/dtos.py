"""
Access Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional

from pydantic import BaseModel


class GuardDecision(BaseModel):
    """Outcome of guarding a page navigation"""

    path: str
    allowed: bool
    redirect_to: Optional[str] = None
    reason: Optional[str] = None
