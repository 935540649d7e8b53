"""Errors raised by the room core.

Every error here is recoverable: the router catches it, replies to the
offending connection only and leaves the room untouched.
"""
from __future__ import annotations


class RoomError(Exception):
    """Base class; ``message`` is the text shown to the player."""

    message = "Request rejected."

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# -----------------------------
# Malformed input
# -----------------------------

class ProtocolError(RoomError):
    message = "Invalid message format."


class UnknownMessageType(ProtocolError):
    message = "Unknown message type."


# -----------------------------
# Rejected requests
# -----------------------------

class ValidationError(RoomError):
    pass


class NameRequired(ValidationError):
    message = "Name is required."


class RoomFull(ValidationError):
    message = "Room is full."


class NotHost(ValidationError):
    message = "Only the host can do that."


class ActiveRound(ValidationError):
    message = "Cannot change duration during an active round."


class InvalidDuration(ValidationError):
    message = "Duration must be between 5 and 60 seconds."


class AlreadyRunning(ValidationError):
    message = "Round is already in progress."


class InsufficientPlayers(ValidationError):
    message = "Need at least two players to start."


class NotRegistered(ValidationError):
    message = "Player not registered."


__all__ = [
    "RoomError",
    "ProtocolError",
    "UnknownMessageType",
    "ValidationError",
    "NameRequired",
    "RoomFull",
    "NotHost",
    "ActiveRound",
    "InvalidDuration",
    "AlreadyRunning",
    "InsufficientPlayers",
    "NotRegistered",
]
