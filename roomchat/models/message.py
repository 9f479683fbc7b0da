"""
Message Model

Stores chat messages ("pesan") posted by a user into a room.
Messages are immutable once created: room_id and user_id are set on insert
and no code path updates or deletes a row.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship, Column
from sqlalchemy import Index, Text

from .base import utc_now, timestamp_column

if TYPE_CHECKING:
    from .room import Room
    from .user import User


class Message(SQLModel, table=True):
    """
    Individual chat message.

    Relationships:
    - Belongs to one User (author)
    - Belongs to one Room

    Ordering within a room is insertion order (autoincrement id).
    """
    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_room_id_created_at", "room_id", "created_at"),
    )

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    room_id: int = Field(foreign_key="rooms.id")
    content: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())

    user: "User" = Relationship(
        back_populates="messages",
        sa_relationship_kwargs={"lazy": "select"}
    )
    room: "Room" = Relationship(
        back_populates="messages",
        sa_relationship_kwargs={"lazy": "select"}
    )
