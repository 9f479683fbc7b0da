"""
Message Store

Append-only persistence of room messages. append() is the single place
that enforces the private-room gate, and the only place that hands new
messages to the room channel, strictly after the row is committed.
"""

import logging
from typing import List, Optional

from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError

from roomchat.models.message import Message
from roomchat.models.room import Room
from roomchat.models.user import User
from roomchat.realtime.room_channel import RoomChannel
from roomchat.schemas.message import MessageRead
from roomchat.services.errors import Forbidden, InvalidInput, NotFound, StorageFailure
from roomchat.services.participant_registry import ParticipantRegistry
from roomchat.settings import HISTORY_LIMIT_DEFAULT

logger = logging.getLogger(__name__)


class MessageStore:
    """Validate, gate, persist and publish chat messages."""

    def __init__(self, session: Session, channel: RoomChannel):
        self.session = session
        self.channel = channel
        self.registry = ParticipantRegistry(session)

    def _get(self, model, key, label: str):
        try:
            row = self.session.get(model, key)
        except SQLAlchemyError as e:
            logger.error(f"{label} lookup failed for {key}: {e}")
            raise StorageFailure(f"{label} lookup failed") from e
        if row is None:
            raise NotFound(f"{label} {key} not found")
        return row

    def get_room(self, room_id: int) -> Room:
        return self._get(Room, room_id, "room")

    def get_user(self, user_id: str) -> User:
        return self._get(User, user_id, "user")

    def append(self, user_id: str, room_id: int, content: str) -> Message:
        """
        Create a message authored by user_id in room_id.

        Raises InvalidInput, NotFound, Forbidden or StorageFailure. On any
        error no row is written and nothing is published.
        """
        if not isinstance(content, str) or not content.strip():
            raise InvalidInput("content must not be empty")
        if not user_id or room_id is None:
            raise InvalidInput("user_id and room_id are required")

        room = self.get_room(room_id)
        self.get_user(user_id)

        if room.is_private and not self.registry.is_participant(user_id, room_id):
            logger.warning(f"User {user_id} is not a participant of private room {room_id}")
            raise Forbidden(f"user {user_id} is not a participant of room {room_id}")

        message = Message(
            user_id=user_id,
            room_id=room_id,
            content=content
        )
        try:
            self.session.add(message)
            self.session.commit()
            self.session.refresh(message)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to store message in room {room_id}: {e}")
            raise StorageFailure("message could not be stored") from e

        logger.info(f"Message {message.id} created in room {room_id} by user {user_id}")

        # Committed; subscribers may now see it
        self._publish(message)
        return message

    def _publish(self, message: Message):
        try:
            self.channel.publish(message.room_id, MessageRead.model_validate(message))
        except Exception as e:
            # The message is already durable, the submitter must not see this
            logger.error(f"Broadcast of message {message.id} to room {message.room_id} failed: {e!r}")

    def history(
        self,
        room_id: int,
        limit: int = HISTORY_LIMIT_DEFAULT,
        before_id: Optional[int] = None
    ) -> List[Message]:
        """Return up to `limit` messages of a room, oldest first."""
        statement = select(Message).where(Message.room_id == room_id)
        if before_id is not None:
            statement = statement.where(Message.id < before_id)
        # Newest page first, then flipped into chronological order
        statement = statement.order_by(Message.id.desc()).limit(limit)

        try:
            rows = list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            logger.error(f"History query failed for room {room_id}: {e}")
            raise StorageFailure("message history unavailable") from e
        return list(reversed(rows))
