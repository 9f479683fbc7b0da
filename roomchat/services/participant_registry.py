"""Participant registry: who may post and read in a private room."""
import logging

from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError

from roomchat.models.participant import Participant
from roomchat.services.errors import StorageFailure

logger = logging.getLogger(__name__)


class ParticipantRegistry:
    """Read-only lookups against the participants table."""

    def __init__(self, session: Session):
        self.session = session

    def is_participant(self, user_id: str, room_id: int) -> bool:
        """Return True iff a Participant row exists for the exact (user, room) pair."""
        statement = select(Participant.id).where(
            Participant.user_id == user_id,
            Participant.room_id == room_id
        )
        try:
            return self.session.exec(statement).first() is not None
        except SQLAlchemyError as e:
            logger.error(f"Participant lookup failed for user {user_id} in room {room_id}: {e}")
            raise StorageFailure("participant lookup failed") from e
