"""
Route access policy

Maps route patterns to what a session needs to enter them. Lookup is exact
match first, then the longest rule whose segments prefix the path, then the
policy default (Public unless configured otherwise).
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union

from tenant_access.domain.entities.enums import Capability
from tenant_access.domain.entities.tenant_role_context import EffectivePermissions


@dataclass(frozen=True)
class Public:
    pass


@dataclass(frozen=True)
class RequiresCapability:
    capability: Capability


RouteRequirement = Union[Public, RequiresCapability]

PUBLIC = Public()


@dataclass(frozen=True)
class RouteRule:
    pattern: str
    requirement: RouteRequirement

    def __post_init__(self):
        if not self.pattern.startswith("/"):
            raise ValueError(f"Route pattern must start with '/': {self.pattern!r}")


DEFAULT_ROUTE_RULES = (
    RouteRule("/manager/tenants", RequiresCapability(Capability.ACCESS_TENANTS)),
    RouteRule("/manager/users", RequiresCapability(Capability.ACCESS_USERS)),
    RouteRule("/manager/roles", RequiresCapability(Capability.ACCESS_ROLES)),
    RouteRule("/manager/settings", RequiresCapability(Capability.ACCESS_SETTINGS)),
    RouteRule("/dashboard", RequiresCapability(Capability.ACCESS_MANAGER)),
    RouteRule("/admin", RequiresCapability(Capability.SUPER_ADMIN)),
)


def _segments(path: str) -> List[str]:
    return [segment for segment in path.split("/") if segment]


@dataclass
class _Node:
    children: Dict[str, "_Node"] = field(default_factory=dict)
    requirement: Optional[RouteRequirement] = None


class RoutePolicy:
    def __init__(
        self,
        rules: Iterable[RouteRule] = DEFAULT_ROUTE_RULES,
        default: RouteRequirement = PUBLIC,
    ):
        self.default = default
        self._exact: Dict[str, RouteRequirement] = {}
        self._root = _Node()

        for rule in rules:
            # First rule for a pattern wins
            if rule.pattern in self._exact:
                continue
            self._exact[rule.pattern] = rule.requirement

            node = self._root
            for segment in _segments(rule.pattern):
                node = node.children.setdefault(segment, _Node())
            node.requirement = rule.requirement

    def requirement_for(self, path: str) -> RouteRequirement:
        exact = self._exact.get(path)
        if exact is not None:
            return exact

        matched: Optional[RouteRequirement] = None
        node = self._root
        for segment in _segments(path):
            node = node.children.get(segment)
            if node is None:
                break
            if node.requirement is not None:
                matched = node.requirement

        return matched if matched is not None else self.default

    def allows(self, path: str, permissions: EffectivePermissions) -> bool:
        requirement = self.requirement_for(path)
        if isinstance(requirement, RequiresCapability):
            return permissions.has(requirement.capability)
        return True
