"""
In-process notification bus.

Cross-component notifications the UI listens for (tenant changes, toasts).
Handlers never affect the publisher: a failing handler is logged and the
remaining handlers still run.
"""

import inspect
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

TENANT_CHANGED = "tenantChanged"
TENANT_SWITCHED = "tenantSwitched"
TENANT_EXPERIENCE_LOADED = "tenantExperienceLoaded"
SHOW_TOAST = "showToast"


@dataclass(frozen=True)
class DomainEvent:
    name: str
    session_id: str
    detail: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "detail": self.detail,
            "created_at": self.created_at.isoformat(),
        }


Handler = Callable[[DomainEvent], Any]


class EventBus:
    def __init__(self):
        self._handlers: Dict[Optional[str], List[Handler]] = {}

    def subscribe(self, name: Optional[str], handler: Handler) -> None:
        """Register handler for one event name, or for every event when name is None."""
        self._handlers.setdefault(name, []).append(handler)

    def unsubscribe(self, name: Optional[str], handler: Handler) -> None:
        handlers = self._handlers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    async def publish(self, event: DomainEvent) -> None:
        handlers = self._handlers.get(event.name, []) + self._handlers.get(None, [])
        logger.debug(f"Publishing {event.name} to {len(handlers)} handler(s)")
        for handler in handlers:
            try:
                outcome = handler(event)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                logger.exception(f"Event handler failed for {event.name}")

    async def emit(self, name: str, session_id: str, detail: Dict[str, Any]) -> DomainEvent:
        event = DomainEvent(name=name, session_id=session_id, detail=detail)
        await self.publish(event)
        return event
