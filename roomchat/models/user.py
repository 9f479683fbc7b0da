"""User model for SQLModel."""
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import TYPE_CHECKING
import uuid

from roomchat.models.base import utc_now, timestamp_column

if TYPE_CHECKING:
    from roomchat.models.message import Message
    from roomchat.models.participant import Participant


class User(SQLModel, table=True):
    """Chat user. Rows are created by the external auth flow and only read here."""
    __tablename__ = "users"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        index=True
    )
    name: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())

    # Relationships
    messages: list["Message"] = Relationship(back_populates="user")
    participations: list["Participant"] = Relationship(back_populates="user")
