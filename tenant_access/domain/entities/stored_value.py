"""
StoredValue Entity

Session-scoped key/value slot that outlives the in-memory session state.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel, Text


class StoredValue(SQLModel, table=True):
    """
    StoredValue entity - one JSON string per (session_id, key).

    Business Rules:
    - Values are stored verbatim; readers own (de)serialization
    - Client-scoped cache only, never an authorization source
    """

    __tablename__ = "session_storage"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    session_id: str = Field(max_length=255, nullable=False)
    key: str = Field(max_length=100, nullable=False)
    value: str = Field(sa_column=Column(Text, nullable=False))

    # Timestamps
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_session_storage_session_key", "session_id", "key", unique=True),
    )
