"""Scrollpad - a terminal line editor."""

from .buffer import TextBuffer, CursorPosition, Viewport, InvariantViolation
from .typing_session import TypingSession, CursorMode, InsertMode

__all__ = [
    'TextBuffer',
    'CursorPosition',
    'Viewport',
    'InvariantViolation',
    'TypingSession',
    'CursorMode',
    'InsertMode',
]
