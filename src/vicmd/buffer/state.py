"""Point, marker and change tracking state for buffers."""

from __future__ import annotations

from dataclasses import dataclass

Position = int


@dataclass(eq=False)
class Marker:
    """Live reference to a buffer position that follows edits.

    The buffer shifts every registered marker when text before it changes;
    consumers that need a stable value read ``position`` once.
    """

    position: Position
    insertion_type: bool = False

    def shift(self, begin: Position, end: Position, inserted: int) -> None:
        removed = end - begin
        if self.position > end or (
            self.position == end and (removed or self.insertion_type)
        ):
            self.position += inserted - removed
        elif self.position > begin:
            self.position = begin

    def __int__(self) -> int:
        return self.position


@dataclass(slots=True)
class BufferState:
    """Mutable point plus bookkeeping tied to a document version."""

    point: Position = 0
    goal_column: int | None = None
    last_change_tick: int = 0
    discarded: bool = False

    def set_point(self, position: Position) -> None:
        self.point = position


__all__ = ["BufferState", "Marker", "Position"]
