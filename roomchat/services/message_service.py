"""
Message Service

Entry point used by the transport layer. Every operation takes the
current user explicitly; authorization for writes lives in MessageStore.
"""

from typing import List, Optional

from sqlmodel import Session

from roomchat.models.message import Message
from roomchat.models.room import Room
from roomchat.realtime.room_channel import RoomChannel
from roomchat.services.errors import Forbidden, InvalidInput
from roomchat.services.message_store import MessageStore
from roomchat.settings import HISTORY_LIMIT_DEFAULT, HISTORY_LIMIT_MAX


class MessageService:
    """Service for posting and reading room messages"""

    def __init__(self, session: Session, channel: RoomChannel):
        self.store = MessageStore(session, channel)

    def submit_message(self, current_user_id: str, room_id: int, content: str) -> Message:
        """Post content into a room as current_user_id."""
        if not current_user_id:
            raise InvalidInput("current user is required")
        user = self.store.get_user(current_user_id)
        return self.store.append(user.id, room_id, content)

    def authorize_reader(self, current_user_id: str, room_id: int) -> Room:
        """Return the room if current_user_id may read it, else raise."""
        self.store.get_user(current_user_id)
        room = self.store.get_room(room_id)
        if room.is_private and not self.store.registry.is_participant(current_user_id, room_id):
            raise Forbidden(f"user {current_user_id} is not a participant of room {room_id}")
        return room

    def list_messages(
        self,
        current_user_id: str,
        room_id: int,
        limit: int = HISTORY_LIMIT_DEFAULT,
        before_id: Optional[int] = None
    ) -> List[Message]:
        """Get a page of room history for a reader"""
        if limit < 1 or limit > HISTORY_LIMIT_MAX:
            raise InvalidInput(f"limit must be between 1 and {HISTORY_LIMIT_MAX}")
        self.authorize_reader(current_user_id, room_id)
        return self.store.history(room_id, limit=limit, before_id=before_id)
