"""
Per-session in-memory state.

One SessionState per browser session, handed out by the SessionRegistry the
application owns. Holds the authoritative in-memory copies of the active
tenant and role context, the lock serializing tenant switches, and the
outbox of notifications not yet delivered to the UI.

A state nobody is using and that holds nothing (no context, no tenant, no
pending notifications) is dropped when its last request releases it; the
stored copy in session storage is reloaded on the next request.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional

from tenant_access.app.services.event_bus import DomainEvent
from tenant_access.domain.entities import TenantRoleContext, TenantSnapshot

logger = logging.getLogger(__name__)

DEFAULT_OUTBOX_SIZE = 50


@dataclass
class SessionState:
    session_id: str
    role_context: Optional[TenantRoleContext] = None
    current_tenant: Optional[TenantSnapshot] = None
    switch_lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    outbox: Deque[DomainEvent] = field(
        default_factory=lambda: deque(maxlen=DEFAULT_OUTBOX_SIZE)
    )
    # Requests currently holding this state
    users: int = 0

    def drain_events(self) -> List[DomainEvent]:
        events = list(self.outbox)
        self.outbox.clear()
        return events

    @property
    def is_idle(self) -> bool:
        return (
            self.users == 0
            and self.role_context is None
            and self.current_tenant is None
            and not self.outbox
            and not self.switch_lock.locked()
        )


class SessionRegistry:
    def __init__(self, outbox_size: int = DEFAULT_OUTBOX_SIZE):
        self.outbox_size = outbox_size
        self._sessions: Dict[str, SessionState] = {}

    def get(self, session_id: str) -> SessionState:
        state = self._sessions.get(session_id)
        if state is None:
            state = SessionState(
                session_id=session_id, outbox=deque(maxlen=self.outbox_size)
            )
            self._sessions[session_id] = state
        return state

    def acquire(self, session_id: str) -> SessionState:
        """Hand the state to a request; pair with release()."""
        state = self.get(session_id)
        state.users += 1
        return state

    def release(self, state: SessionState) -> None:
        state.users = max(0, state.users - 1)
        if state.is_idle and self._sessions.get(state.session_id) is state:
            del self._sessions[state.session_id]

    def discard(self, session_id: str) -> None:
        """Forget a session entirely (logout), pending notifications included."""
        if self._sessions.pop(session_id, None) is not None:
            logger.debug(f"Discarded state for session {session_id}")

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def record(self, event: DomainEvent) -> None:
        """EventBus handler: queue the event in its session's outbox."""
        self.get(event.session_id).outbox.append(event)
