"""Room router: rooms and private-room participants."""
from typing import List

from fastapi import APIRouter, Depends, status

from roomchat.middleware.auth import get_current_user, CurrentUser
from roomchat.routers.deps import get_room_service, http_error
from roomchat.schemas.room import RoomCreate, RoomRead, ParticipantCreate, ParticipantRead
from roomchat.services.errors import ChatError
from roomchat.services.room_service import RoomService

router = APIRouter(tags=["Rooms"])  # No prefix since main.py adds /api prefix


@router.post("/rooms", response_model=RoomRead, status_code=status.HTTP_201_CREATED)
async def create_room(
    room_data: RoomCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: RoomService = Depends(get_room_service),
):
    """Create a room. The creator of a private room is its first participant."""
    try:
        return service.create_room(
            name=room_data.name,
            is_private=room_data.is_private,
            creator_id=current_user.user_id
        )
    except ChatError as e:
        raise http_error(e)


@router.get("/rooms", response_model=List[RoomRead])
async def list_rooms(
    current_user: CurrentUser = Depends(get_current_user),
    service: RoomService = Depends(get_room_service),
):
    """List public rooms and the private rooms the caller participates in."""
    return service.list_rooms(current_user.user_id)


@router.get("/rooms/{room_id}", response_model=RoomRead)
async def get_room(
    room_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: RoomService = Depends(get_room_service),
):
    try:
        return service.require_member(room_id, current_user.user_id)
    except ChatError as e:
        raise http_error(e)


@router.get("/rooms/{room_id}/participants", response_model=List[ParticipantRead])
async def list_participants(
    room_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: RoomService = Depends(get_room_service),
):
    try:
        service.require_member(room_id, current_user.user_id)
        return service.list_participants(room_id)
    except ChatError as e:
        raise http_error(e)


@router.post(
    "/rooms/{room_id}/participants",
    response_model=ParticipantRead,
    status_code=status.HTTP_201_CREATED
)
async def add_participant(
    room_id: int,
    participant_data: ParticipantCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: RoomService = Depends(get_room_service),
):
    """Grant a user access to a private room. Only existing participants may invite."""
    try:
        service.require_member(room_id, current_user.user_id)
        return service.add_participant(room_id, participant_data.user_id)
    except ChatError as e:
        raise http_error(e)


@router.delete("/rooms/{room_id}/participants/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_participant(
    room_id: int,
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: RoomService = Depends(get_room_service),
):
    """Revoke a user's access. Their earlier messages stay in the room."""
    try:
        service.require_member(room_id, current_user.user_id)
        service.remove_participant(room_id, user_id)
    except ChatError as e:
        raise http_error(e)
