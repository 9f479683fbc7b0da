"""Shared router dependencies and error translation."""
from fastapi import Depends, HTTPException, status
from sqlmodel import Session

from roomchat.db.config import get_session
from roomchat.realtime.room_channel import RoomChannel, get_room_channel
from roomchat.services.errors import (
    ChatError, Conflict, Forbidden, InvalidInput, NotFound, StorageFailure
)
from roomchat.services.message_service import MessageService
from roomchat.services.room_service import RoomService

ERROR_STATUS = {
    InvalidInput: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFound: status.HTTP_404_NOT_FOUND,
    Forbidden: status.HTTP_403_FORBIDDEN,
    Conflict: status.HTTP_409_CONFLICT,
    StorageFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def http_error(error: ChatError) -> HTTPException:
    """Translate a service error into the HTTPException the client sees."""
    code = ERROR_STATUS.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = {"Retry-After": "1"} if error.retryable else None
    return HTTPException(status_code=code, detail=error.detail, headers=headers)


def get_message_service(
    session: Session = Depends(get_session),
    channel: RoomChannel = Depends(get_room_channel),
) -> MessageService:
    """Dependency for getting MessageService instance."""
    return MessageService(session, channel)


def get_room_service(
    session: Session = Depends(get_session),
    channel: RoomChannel = Depends(get_room_channel),
) -> RoomService:
    """Dependency for getting RoomService instance."""
    return RoomService(session, channel)
