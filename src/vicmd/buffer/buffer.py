"""High-level buffer façade combining document, state, registers and undo."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, List, Optional
from weakref import WeakSet

from vicmd.runtime import telemetry

from .document import BufferDocument
from .registers import RegisterBank
from .state import BufferState, Marker, Position
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_position


@dataclass(frozen=True, slots=True)
class BufferDelta:
    version: int
    begin: Position
    end: Position
    removed: str
    inserted: str
    label: str


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        registers: Optional[RegisterBank] = None,
        undo: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.registers = registers or RegisterBank()
        self.undo = undo or UndoTimeline()
        self._markers: "WeakSet[Marker]" = WeakSet()

    @classmethod
    def from_text(
        cls, text: str, *, name: str = "default", point: Position = 0
    ) -> "Buffer":
        buffer = cls(name=name, document=BufferDocument.from_text(text))
        buffer.goto(point)
        return buffer

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def point(self) -> Position:
        return self.state.point

    def goto(self, position: Position) -> Position:
        """Move point, clamped to the buffer; returns the new point."""

        self.state.set_point(self.document.clamp(position))
        return self.state.point

    def marker(self, position: Optional[Position] = None) -> Marker:
        marker = Marker(self.point if position is None else position)
        self._markers.add(marker)
        return marker

    def replace_range(
        self, begin: Position, end: Position, text: str, *, label: str
    ) -> BufferDelta:
        begin = ensure_position(self.document, begin)
        end = ensure_position(self.document, end)
        if begin > end:
            begin, end = end, begin
        with Transaction(self, label) as tx:
            removed = self.document.text[begin:end]
            self.document = self.document.replace(begin, end, text)
            for marker in list(self._markers):
                marker.shift(begin, end, len(text))
            self.state.last_change_tick = self.document.version
            tx.commit(begin + len(text))
        return BufferDelta(
            version=self.document.version,
            begin=begin,
            end=end,
            removed=removed,
            inserted=text,
            label=label,
        )

    def insert_text(
        self, text: str, *, position: Optional[Position] = None
    ) -> BufferDelta:
        at = self.point if position is None else position
        return self.replace_range(at, at, text, label="insert_text")

    def delete_range(self, begin: Position, end: Position) -> BufferDelta:
        return self.replace_range(begin, end, "", label="delete_range")

    def get_text_range(self, begin: Position, end: Position) -> str:
        begin, end = sorted(
            (ensure_position(self.document, begin), ensure_position(self.document, end))
        )
        return self.document.text[begin:end]

    def apply_undo(self, *, redo: bool = False) -> Optional[UndoEntry]:
        entry = self.undo.redo() if redo else self.undo.undo()
        if entry is None:
            return None
        target = entry.after_text if redo else entry.before_text
        version = self.document.version + 1
        self.document = BufferDocument(text=target, version=version)
        self.goto(entry.point_after if redo else entry.point_before)
        return entry

    def discard(self) -> None:
        """Drop the buffer contents and mark it unusable for further edits."""

        with telemetry.span(
            "buffer::discard", component=True, metadata={"buffer": self.name}
        ):
            self.document = BufferDocument(version=self.document.version + 1)
            self.undo = UndoTimeline()
            self.state = BufferState(discarded=True)
            markers: List[Marker] = list(self._markers)
            for marker in markers:
                marker.position = 0


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None
        self._before_text = ""
        self._before_point: Position = 0

    def __enter__(self) -> "Transaction":
        self._before_text = self.buffer.text
        self._before_point = self.buffer.point
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, point_after: Position) -> None:
        self.buffer.undo.push(
            UndoEntry(
                label=self.label,
                before_text=self._before_text,
                after_text=self.buffer.text,
                point_before=self._before_point,
                point_after=point_after,
            )
        )

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
