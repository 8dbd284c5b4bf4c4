from typing import Dict, Optional, Tuple

import pytest
from unittest.mock import AsyncMock, MagicMock

from tenant_access.app.repositories.storage_repository import IStorageRepository
from tenant_access.app.services.event_bus import EventBus
from tenant_access.app.services.session_state import SessionState
from tenant_access.app.services.tenant_context_store import TenantContextStore


class InMemoryStorage(IStorageRepository):
    def __init__(self):
        self.values: Dict[Tuple[str, str], str] = {}

    async def get(self, session_id: str, key: str) -> Optional[str]:
        return self.values.get((session_id, key))

    async def set(self, session_id: str, key: str, value: str) -> None:
        self.values[(session_id, key)] = value

    async def remove(self, session_id: str, key: str) -> None:
        self.values.pop((session_id, key), None)

    async def remove_session(self, session_id: str) -> int:
        keys = [key for key in self.values if key[0] == session_id]
        for key in keys:
            del self.values[key]
        return len(keys)


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.storage = InMemoryStorage()
    return uow


@pytest.fixture
def session_state():
    return SessionState(session_id="session-1")


@pytest.fixture
def store(session_state, mock_uow):
    return TenantContextStore(session_state, mock_uow)


@pytest.fixture
def events():
    bus = EventBus()
    bus.received = []
    bus.subscribe(None, bus.received.append)
    return bus


@pytest.fixture
def mock_directory():
    directory = MagicMock()
    directory.is_current_user_super_admin = AsyncMock(return_value=False)
    directory.get_tenant = AsyncMock(return_value=None)
    directory.get_user_role_in_tenant = AsyncMock()
    directory.switch_as_super_admin = AsyncMock()
    directory.list_tenants_for_super_admin = AsyncMock()
    return directory
