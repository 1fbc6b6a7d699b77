"""Offset-addressed text storage with a line index."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class BufferDocument:
    """Immutable text plus the offsets at which each line starts.

    Positions are 0-based character offsets in ``[0, len(text)]``. Every
    edit produces a new document with a bumped ``version``.
    """

    text: str = ""
    version: int = 0
    _line_starts: List[int] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts = [0]
        index = self.text.find("\n")
        while index != -1:
            starts.append(index + 1)
            index = self.text.find("\n", index + 1)
        self._line_starts = starts

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(text=text)

    def replace(self, begin: int, end: int, text: str) -> "BufferDocument":
        """Return a document with ``[begin, end)`` replaced by ``text``."""

        updated = self.text[:begin] + text + self.text[end:]
        return BufferDocument(text=updated, version=self.version + 1)

    def __len__(self) -> int:
        return len(self.text)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def clamp(self, position: int) -> int:
        return max(0, min(position, len(self.text)))

    def line_number(self, position: int) -> int:
        return bisect_right(self._line_starts, self.clamp(position)) - 1

    def line_start(self, index: int) -> int:
        index = max(0, min(index, self.line_count - 1))
        return self._line_starts[index]

    def line_beginning(self, position: int) -> int:
        return self._line_starts[self.line_number(position)]

    def line_end(self, position: int) -> int:
        """Offset of the newline ending ``position``'s line (or buffer end)."""

        index = self.line_number(position)
        if index + 1 < self.line_count:
            return self._line_starts[index + 1] - 1
        return len(self.text)

    def next_line_beginning(self, position: int) -> int:
        index = self.line_number(position)
        if index + 1 < self.line_count:
            return self._line_starts[index + 1]
        return len(self.text)

    def column(self, position: int) -> int:
        position = self.clamp(position)
        return position - self.line_beginning(position)

    def position(self, line: int, column: int) -> int:
        """Offset of ``column`` on ``line``, clamped to that line's extent."""

        begin = self.line_start(line)
        return min(begin + max(0, column), self.line_end(begin))

    def is_bol(self, position: int) -> bool:
        position = self.clamp(position)
        return self.line_beginning(position) == position

    def get_line(self, index: int) -> str:
        begin = self.line_start(index)
        return self.text[begin : self.line_end(begin)]

    def is_blank_line(self, index: int) -> bool:
        return not self.get_line(index).strip()

    def char_at(self, position: int) -> str:
        if 0 <= position < len(self.text):
            return self.text[position]
        return ""

    def count_lines(self, begin: int, end: int) -> int:
        """Number of lines touched by ``[begin, end)``.

        Counts the newlines in the region, plus one when the region is
        non-empty and does not end right after a newline.
        """

        begin, end = sorted((self.clamp(begin), self.clamp(end)))
        if begin == end:
            return 0
        region = self.text[begin:end]
        lines = region.count("\n")
        if not region.endswith("\n"):
            lines += 1
        return lines
