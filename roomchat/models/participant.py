"""
Participant Model

Grants one user posting and reading rights in one private room.
At most one row exists per (user_id, room_id) pair.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import UniqueConstraint

from .base import utc_now, timestamp_column

if TYPE_CHECKING:
    from .room import Room
    from .user import User


class Participant(SQLModel, table=True):
    __tablename__ = "participants"
    __table_args__ = (
        UniqueConstraint("user_id", "room_id", name="uq_participants_user_room"),
    )

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    room_id: int = Field(foreign_key="rooms.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())

    user: "User" = Relationship(back_populates="participations")
    room: "Room" = Relationship(back_populates="participants")
