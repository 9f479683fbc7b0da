"""roomchat: room-scoped chat with private-room access control and live fan-out."""
