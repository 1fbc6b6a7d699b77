"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .document import BufferDocument
from .state import Position


class BufferValidationError(RuntimeError):
    """Raised when callers hand the buffer an out-of-range position."""

    def __init__(self, message: str, *, position: Position | None = None) -> None:
        super().__init__(message)
        self.position = position


def ensure_position(document: BufferDocument, position: Position) -> Position:
    if position < 0 or position > len(document):
        raise BufferValidationError(
            f"Position {position} outside 0..{len(document)}", position=position
        )
    return position


__all__ = ["BufferValidationError", "ensure_position"]
