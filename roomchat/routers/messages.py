"""
Message ("pesan") API Router

Posting into a room and reading its history. Live delivery of new
messages goes through the WebSocket route in realtime.py.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from roomchat.middleware.auth import get_current_user, CurrentUser
from roomchat.routers.deps import get_message_service, http_error
from roomchat.schemas.message import MessageCreate, MessageRead, MessageList
from roomchat.services.errors import ChatError
from roomchat.services.message_service import MessageService
from roomchat.settings import HISTORY_LIMIT_DEFAULT

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Messages"])  # No prefix since main.py adds /api prefix


@router.post(
    "/rooms/{room_id}/pesan",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED
)
async def create_message(
    room_id: int,
    message_data: MessageCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """
    Post a message into a room as the authenticated user.

    Private rooms accept messages only from their participants. The stored
    message is broadcast to the room's live subscribers after it is committed.
    """
    try:
        return service.submit_message(current_user.user_id, room_id, message_data.content)
    except ChatError as e:
        logger.info(f"Message from user {current_user.user_id} to room {room_id} rejected: {e.detail}")
        raise http_error(e)


@router.get("/rooms/{room_id}/pesan", response_model=MessageList)
async def list_messages(
    room_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
    limit: int = Query(HISTORY_LIMIT_DEFAULT, description="Maximum number of messages to return"),
    before_id: Optional[int] = Query(None, description="Only messages older than this id"),
):
    """Read room history, oldest first. Used by clients to catch up before going live."""
    try:
        messages = service.list_messages(
            current_user.user_id,
            room_id,
            limit=limit,
            before_id=before_id
        )
    except ChatError as e:
        raise http_error(e)

    return {
        "messages": messages,
        "count": len(messages)
    }
