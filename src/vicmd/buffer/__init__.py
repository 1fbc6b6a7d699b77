"""Buffer abstractions: offset-addressed text, markers, registers, undo."""

from .buffer import Buffer, BufferDelta, Transaction
from .document import BufferDocument
from .registers import RegisterBank, RegisterValue
from .state import BufferState, Marker, Position
from .undo import UndoEntry, UndoTimeline
from .validation import BufferValidationError, ensure_position

__all__ = [
    "Buffer",
    "BufferDelta",
    "BufferDocument",
    "BufferState",
    "BufferValidationError",
    "Marker",
    "Position",
    "RegisterBank",
    "RegisterValue",
    "Transaction",
    "UndoEntry",
    "UndoTimeline",
    "ensure_position",
]
