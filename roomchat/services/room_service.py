"""Room service: rooms and participant grants."""
import logging
from typing import List, Optional

from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from roomchat.models.participant import Participant
from roomchat.models.room import Room
from roomchat.models.user import User
from roomchat.realtime.room_channel import RoomChannel
from roomchat.services.errors import Conflict, Forbidden, InvalidInput, NotFound, StorageFailure
from roomchat.services.participant_registry import ParticipantRegistry

logger = logging.getLogger(__name__)


class RoomService:
    """Service class for room CRUD and private-room membership."""

    def __init__(self, session: Session, channel: Optional[RoomChannel] = None):
        self.session = session
        self.channel = channel
        self.registry = ParticipantRegistry(session)

    def _commit(self, action: str):
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise StorageFailure(f"could not {action}") from e

    def create_room(self, name: str, is_private: bool = False, creator_id: str | None = None) -> Room:
        """Create a room. The creator of a private room becomes its first participant."""
        if not name or not name.strip():
            raise InvalidInput("room name must not be empty")
        if is_private and creator_id and self.session.get(User, creator_id) is None:
            raise NotFound(f"user {creator_id} not found")

        room = Room(name=name.strip(), is_private=is_private)
        self.session.add(room)
        self._commit("create room")
        self.session.refresh(room)

        if is_private and creator_id:
            self.add_participant(room.id, creator_id)

        logger.info(f"Room {room.id} ({room.name!r}, private={room.is_private}) created")
        return room

    def get_room(self, room_id: int) -> Room:
        room = self.session.get(Room, room_id)
        if room is None:
            raise NotFound(f"room {room_id} not found")
        return room

    def list_rooms(self, user_id: str) -> List[Room]:
        """Public rooms plus the private rooms user_id participates in."""
        joined = select(Participant.room_id).where(Participant.user_id == user_id)
        statement = select(Room).where(
            (Room.is_private == False) | (Room.id.in_(joined))  # noqa: E712
        ).order_by(Room.id)
        return list(self.session.exec(statement).all())

    def add_participant(self, room_id: int, user_id: str) -> Participant:
        """Grant user_id posting and reading rights in a private room."""
        room = self.get_room(room_id)
        if not room.is_private:
            raise InvalidInput(f"room {room_id} is public and has no participant list")
        if self.session.get(User, user_id) is None:
            raise NotFound(f"user {user_id} not found")

        participant = Participant(user_id=user_id, room_id=room_id)
        self.session.add(participant)
        try:
            self._commit("add participant")
        except IntegrityError as e:
            raise Conflict(f"user {user_id} is already a participant of room {room_id}") from e
        self.session.refresh(participant)

        logger.info(f"User {user_id} joined private room {room_id}")
        return participant

    def list_participants(self, room_id: int) -> List[Participant]:
        self.get_room(room_id)
        statement = select(Participant).where(Participant.room_id == room_id).order_by(Participant.id)
        return list(self.session.exec(statement).all())

    def require_member(self, room_id: int, user_id: str) -> Room:
        """Return the room if user_id may see it. Private rooms are for participants only."""
        room = self.get_room(room_id)
        if room.is_private and not self.registry.is_participant(user_id, room_id):
            raise Forbidden(f"user {user_id} is not a participant of room {room_id}")
        return room

    def remove_participant(self, room_id: int, user_id: str):
        """Revoke access from now on. Messages already stored are kept."""
        statement = select(Participant).where(
            Participant.room_id == room_id,
            Participant.user_id == user_id
        )
        participant = self.session.exec(statement).first()
        if participant is None:
            raise NotFound(f"user {user_id} is not a participant of room {room_id}")

        self.session.delete(participant)
        self._commit("remove participant")
        logger.info(f"User {user_id} removed from private room {room_id}")

        # Open live streams of the removed user stop receiving this room
        if self.channel is not None:
            self.channel.revoke(room_id, user_id)
