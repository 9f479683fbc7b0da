"""Room model for SQLModel."""
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import TYPE_CHECKING, List

from roomchat.models.base import utc_now, timestamp_column

if TYPE_CHECKING:
    from roomchat.models.message import Message
    from roomchat.models.participant import Participant


class Room(SQLModel, table=True):
    """
    Chat room, optionally private.

    Relationships:
    - Has many Messages
    - Has many Participants (only meaningful while is_private is set)
    """
    __tablename__ = "rooms"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, min_length=1, index=True)
    is_private: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())

    messages: List["Message"] = Relationship(back_populates="room")
    participants: List["Participant"] = Relationship(
        back_populates="room",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
