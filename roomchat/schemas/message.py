"""Message schemas for the chat API."""
from pydantic import BaseModel, Field
from datetime import datetime


class MessageCreate(BaseModel):
    """Schema for posting a message into a room."""
    content: str = Field(..., min_length=1, max_length=5000)


class MessageRead(BaseModel):
    """Schema for message API responses and live broadcasts."""
    id: int
    user_id: str
    room_id: int
    content: str
    created_at: datetime

    class Config:
        from_attributes = True
        frozen = True


class MessageList(BaseModel):
    """Schema for a page of room history, oldest first."""
    messages: list[MessageRead]
    count: int
