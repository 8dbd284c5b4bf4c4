from abc import ABC, abstractmethod
from typing import Optional


class IStorageRepository(ABC):
    """Session key/value storage interface - application layer"""

    @abstractmethod
    async def get(self, session_id: str, key: str) -> Optional[str]:
        """Get raw stored value for a session key"""
        pass

    @abstractmethod
    async def set(self, session_id: str, key: str, value: str) -> None:
        """Create or replace the value for a session key"""
        pass

    @abstractmethod
    async def remove(self, session_id: str, key: str) -> None:
        """Delete a session key if present"""
        pass

    @abstractmethod
    async def remove_session(self, session_id: str) -> int:
        """Delete every key of a session, returns number of keys removed"""
        pass
