"""SQLModel tables for roomchat."""

from .user import User
from .room import Room
from .participant import Participant
from .message import Message

__all__ = ["User", "Room", "Participant", "Message"]
