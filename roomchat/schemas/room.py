"""Room and participant schemas for the chat API."""
from pydantic import BaseModel, Field
from datetime import datetime


class RoomCreate(BaseModel):
    """Schema for creating a room."""
    name: str = Field(..., min_length=1, max_length=100)
    is_private: bool = False


class RoomRead(BaseModel):
    """Schema for room API responses."""
    id: int
    name: str
    is_private: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ParticipantCreate(BaseModel):
    """Schema for granting a user access to a private room."""
    user_id: str = Field(..., min_length=1)


class ParticipantRead(BaseModel):
    """Schema for participant API responses."""
    id: int
    user_id: str
    room_id: int
    created_at: datetime

    class Config:
        from_attributes = True
