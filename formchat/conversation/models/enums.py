"""Enums for conversation domain."""

from enum import Enum


class MessageRole(str, Enum):
    """Author of a transcript message."""

    USER = "user"
    AGENT = "agent"
