from .room_channel import RoomChannel, SubscriptionHandle, QueueListener, room_channel, get_room_channel

__all__ = ["RoomChannel", "SubscriptionHandle", "QueueListener", "room_channel", "get_room_channel"]
