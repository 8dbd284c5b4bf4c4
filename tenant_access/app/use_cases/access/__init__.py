"""
Access Use Cases

Route access decisions for the active role context.
"""

from .check_route_access_use_case import CheckRouteAccessUseCase
from .dtos import GuardDecision
from .guard_route_use_case import GuardRouteUseCase
from .resolve_landing_route_use_case import ResolveLandingRouteUseCase

__all__ = [
    "CheckRouteAccessUseCase",
    "GuardRouteUseCase",
    "ResolveLandingRouteUseCase",
    "GuardDecision",
]
