"""Linear undo history for buffer transactions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .state import Position


@dataclass(frozen=True, slots=True)
class UndoEntry:
    label: str
    before_text: str
    after_text: str
    point_before: Position
    point_after: Position


class UndoTimeline:
    """Undo list with a redo tail; a new entry drops anything undone."""

    def __init__(self, *, limit: int = 1000) -> None:
        self._entries: List[UndoEntry] = []
        self._cursor = 0
        self._limit = limit

    def __len__(self) -> int:
        return self._cursor

    def push(self, entry: UndoEntry) -> None:
        del self._entries[self._cursor :]
        self._entries.append(entry)
        if len(self._entries) > self._limit:
            del self._entries[0]
        self._cursor = len(self._entries)

    def undo(self) -> Optional[UndoEntry]:
        if self._cursor == 0:
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> Optional[UndoEntry]:
        if self._cursor >= len(self._entries):
            return None
        entry = self._entries[self._cursor]
        self._cursor += 1
        return entry
