"""
Room Channel for Real-Time Updates.

Keeps the set of live listeners per room and fans each committed message
out to them. Delivery is best effort and at most once; nothing is queued
for listeners that are not subscribed when a message is published.
"""

import asyncio
import itertools
import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple

from roomchat.settings import SUBSCRIBER_QUEUE_SIZE

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class SubscriptionHandle:
    """One listener's registration to a room. Release it to unsubscribe."""

    def __init__(self, channel: "RoomChannel", room_id: int, token: int, user_id: Optional[str] = None):
        self._channel = channel
        self.room_id = room_id
        self.user_id = user_id
        self._token = token
        self._released = False

    @property
    def active(self) -> bool:
        return not self._released

    def release(self):
        """Unregister the listener. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        self._channel._unsubscribe(self.room_id, self._token)

    def __enter__(self) -> "SubscriptionHandle":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


class _RoomSubscribers:
    """Listeners of a single room, stored as a copy-on-write tuple of (token, user_id, listener)."""

    def __init__(self):
        self.lock = threading.Lock()
        self.listeners: Tuple[Tuple[int, Optional[str], Listener], ...] = ()

    def add(self, token: int, user_id: Optional[str], listener: Listener):
        with self.lock:
            self.listeners = self.listeners + ((token, user_id, listener),)

    def remove(self, token: int) -> bool:
        with self.lock:
            remaining = tuple(entry for entry in self.listeners if entry[0] != token)
            removed = len(remaining) != len(self.listeners)
            self.listeners = remaining
            return removed

    def remove_user(self, user_id: str) -> Tuple[Tuple[int, Optional[str], Listener], ...]:
        with self.lock:
            removed = tuple(entry for entry in self.listeners if entry[1] == user_id)
            self.listeners = tuple(entry for entry in self.listeners if entry[1] != user_id)
            return removed


class RoomChannel:
    """Per-room publish/subscribe for newly created messages."""

    def __init__(self):
        self._rooms: Dict[int, _RoomSubscribers] = {}
        # Guards creation and removal of room buckets, never held while delivering
        self._registry_lock = threading.Lock()
        self._tokens = itertools.count(1)

    def subscribe(self, room_id: int, listener: Listener, user_id: Optional[str] = None) -> SubscriptionHandle:
        """Register a listener for messages published to room_id from now on."""
        token = next(self._tokens)
        with self._registry_lock:
            bucket = self._rooms.setdefault(room_id, _RoomSubscribers())
            bucket.add(token, user_id, listener)
        logger.info(f"Listener subscribed to room {room_id}. Subscribers: {self.subscriber_count(room_id)}")
        return SubscriptionHandle(self, room_id, token, user_id)

    def _unsubscribe(self, room_id: int, token: int):
        with self._registry_lock:
            bucket = self._rooms.get(room_id)
            if bucket is None or not bucket.remove(token):
                return
            if not bucket.listeners:
                del self._rooms[room_id]
        logger.info(f"Listener left room {room_id}. Remaining subscribers: {self.subscriber_count(room_id)}")

    def revoke(self, room_id: int, user_id: str) -> int:
        """
        Drop every subscription user_id holds in room_id.

        Listeners that expose a revoke() method are told so they can close
        their connection. Returns the number of subscriptions removed.
        """
        with self._registry_lock:
            bucket = self._rooms.get(room_id)
            if bucket is None:
                return 0
            removed = bucket.remove_user(user_id)
            if not bucket.listeners:
                del self._rooms[room_id]

        for token, _, listener in removed:
            notify = getattr(listener, "revoke", None)
            if notify is None:
                continue
            try:
                notify()
            except Exception as e:
                logger.warning(f"Failed to notify revoked listener {token} in room {room_id}: {e!r}")

        if removed:
            logger.info(f"Revoked {len(removed)} subscription(s) of user {user_id} in room {room_id}")
        return len(removed)

    def subscriber_count(self, room_id: int) -> int:
        bucket = self._rooms.get(room_id)
        return len(bucket.listeners) if bucket else 0

    def active_rooms(self) -> list:
        """Ids of rooms that currently have at least one listener."""
        return list(self._rooms)

    def publish(self, room_id: int, message: Any) -> int:
        """
        Deliver a message to every listener of room_id subscribed right now.

        Listener errors are logged and skipped so the remaining listeners still
        receive the message. Returns the number of successful deliveries.
        """
        bucket = self._rooms.get(room_id)
        if bucket is None:
            return 0

        # Snapshot; concurrent subscribe/unsubscribe swap in a new tuple
        snapshot = bucket.listeners
        delivered = 0

        for token, _, listener in snapshot:
            try:
                listener(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping delivery to listener {token} in room {room_id}: {e!r}")

        logger.debug(f"Published message to room {room_id}: {delivered}/{len(snapshot)} delivered")
        return delivered


class QueueListener:
    """
    Listener that buffers messages for one WebSocket connection.

    Must be called from the event loop that consumes the queue. When the
    client is too slow and the queue fills up, the buffer is replaced by a
    single RESYNC marker so the client knows to reload history, and the put
    raises so the channel logs the drop. After revoke() the buffer holds only
    the REVOKED marker and further deliveries are refused.
    """

    RESYNC = object()
    REVOKED = object()

    def __init__(self, maxsize: int = SUBSCRIBER_QUEUE_SIZE):
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.revoked = False

    def __call__(self, message: Any):
        if self.revoked:
            raise PermissionError("subscription revoked")
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            self._reset(self.RESYNC)
            raise

    def revoke(self):
        self.revoked = True
        self._reset(self.REVOKED)

    def _reset(self, marker: object):
        while not self.queue.empty():
            self.queue.get_nowait()
        self.queue.put_nowait(marker)

    async def get(self) -> Any:
        return await self.queue.get()


# Global room channel instance
room_channel = RoomChannel()


def get_room_channel() -> RoomChannel:
    """Dependency for getting the process-wide RoomChannel."""
    return room_channel
