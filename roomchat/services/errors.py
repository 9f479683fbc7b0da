"""Error kinds raised by the chat services.

Routers translate these into HTTP responses; services never swallow them.
"""


class ChatError(Exception):
    """Base class for chat service errors."""

    retryable = False

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidInput(ChatError):
    """Empty content or a missing user/room reference."""


class NotFound(ChatError):
    """Referenced room, user or participant does not exist."""


class Forbidden(ChatError):
    """User is not a participant of a private room."""


class Conflict(ChatError):
    """Write would break a uniqueness rule (duplicate participant)."""


class StorageFailure(ChatError):
    """Underlying persistence is unavailable. Callers may retry."""

    retryable = True
