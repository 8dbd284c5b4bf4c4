from datetime import datetime
from typing import Optional

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_access.app.repositories.storage_repository import IStorageRepository
from tenant_access.domain.entities import StoredValue


class StorageRepository(IStorageRepository):
    """Session storage repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_row(self, session_id: str, key: str) -> Optional[StoredValue]:
        stmt = select(StoredValue).where(
            StoredValue.session_id == session_id, StoredValue.key == key
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get(self, session_id: str, key: str) -> Optional[str]:
        """Get raw stored value for a session key"""
        row = await self._get_row(session_id, key)
        return row.value if row is not None else None

    async def set(self, session_id: str, key: str, value: str) -> None:
        """Create or replace the value for a session key"""
        row = await self._get_row(session_id, key)
        if row is None:
            row = StoredValue(session_id=session_id, key=key, value=value)
        else:
            row.value = value
            row.updated_at = datetime.utcnow()
        self.session.add(row)
        await self.session.flush()

    async def remove(self, session_id: str, key: str) -> None:
        """Delete a session key if present"""
        stmt = delete(StoredValue).where(
            StoredValue.session_id == session_id, StoredValue.key == key
        )
        await self.session.execute(stmt)

    async def remove_session(self, session_id: str) -> int:
        """Delete every key of a session"""
        stmt = delete(StoredValue).where(StoredValue.session_id == session_id)
        result = await self.session.execute(stmt)
        return result.rowcount
