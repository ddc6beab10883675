"""Exceptions raised by the arena engine."""


class ArenaError(Exception):
    """Base class for arena engine errors."""


class EmptyRosterError(ArenaError, ValueError):
    """Raised when a speaker has to be picked from an empty roster."""

    def __init__(self, message: str = "No agents in roster."):
        super().__init__(message)


class ChatCompletionError(ArenaError):
    """Raised when the completion endpoint answers with a non-success status."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Request failed ({status_code}).")


class StreamError(ArenaError):
    """Raised when the completion stream reports an error payload."""
