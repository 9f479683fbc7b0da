"""
WebSocket route for live room updates.

A client connects to /ws/rooms/{room_id}?token=<jwt> and receives every
message created in that room while it stays connected. Missed messages
are fetched through the history endpoint; a "resync" event tells the
client it fell behind and must do so.
"""

import asyncio
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlmodel import Session

from roomchat.db.config import engine
from roomchat.middleware.auth import decode_user_id
from roomchat.realtime.room_channel import QueueListener, RoomChannel, get_room_channel
from roomchat.services.errors import ChatError
from roomchat.services.message_service import MessageService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])


async def _forward(websocket: WebSocket, listener: QueueListener, room_id: int):
    while True:
        item = await listener.get()
        if item is QueueListener.REVOKED:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return
        if item is QueueListener.RESYNC:
            await websocket.send_json({"type": "resync", "room_id": room_id})
            continue
        await websocket.send_json({
            "type": "message_created",
            "data": item.model_dump(mode="json"),
        })


async def _drain(websocket: WebSocket):
    # Clients do not send anything meaningful; reading detects the disconnect
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        return


@router.websocket("/ws/rooms/{room_id}")
async def room_updates(
    websocket: WebSocket,
    room_id: int,
    token: str = Query(None),
    channel: RoomChannel = Depends(get_room_channel),
):
    """Stream messages of one room to an authorized client."""
    user_id = decode_user_id(token) if token else None
    if not user_id:
        logger.warning(f"WebSocket for room {room_id} rejected: missing or invalid token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    listener = QueueListener()

    # Subscribed before the access check, so a revocation committed after
    # the check always finds this subscription
    with channel.subscribe(room_id, listener, user_id=user_id):
        try:
            with Session(engine) as session:
                MessageService(session, channel).authorize_reader(user_id, room_id)
        except ChatError as e:
            logger.warning(f"WebSocket for room {room_id} rejected for user {user_id}: {e.detail}")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        await websocket.accept()
        await websocket.send_json({
            "type": "connection_established",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "room_id": room_id,
        })
        logger.info(f"User {user_id} connected to room {room_id}. Subscribers: {channel.subscriber_count(room_id)}")

        tasks = [
            asyncio.create_task(_forward(websocket, listener, room_id)),
            asyncio.create_task(_drain(websocket)),
        ]
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                error = task.exception()
                if error is not None:
                    logger.error(f"WebSocket for user {user_id} in room {room_id} failed: {error!r}")
        finally:
            # No await here: this also runs when the server cancels the handler
            for task in tasks:
                task.cancel()

    logger.info(f"User {user_id} disconnected from room {room_id}. Remaining subscribers: {channel.subscriber_count(room_id)}")
