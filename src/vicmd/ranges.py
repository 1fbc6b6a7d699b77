"""Range types and the expand/contract/describe algebra.

A motion produces two raw positions and a range type. Expanding the pair
yields the half-open span ``[begin, end)`` an operator acts on, tagged with
the type that produced it; contracting undoes the expansion where that is
possible.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Literal, Optional, Protocol, Tuple, Union


class RangeType(str, Enum):
    EXCLUSIVE = "exclusive"
    INCLUSIVE = "inclusive"
    LINE = "line"
    BLOCK = "block"


class LineIndex(Protocol):
    """Subset of ``BufferDocument`` the algebra relies on."""

    def is_bol(self, position: int) -> bool: ...

    def line_beginning(self, position: int) -> int: ...

    def next_line_beginning(self, position: int) -> int: ...

    def line_number(self, position: int) -> int: ...

    def column(self, position: int) -> int: ...

    def position(self, line: int, column: int) -> int: ...

    def count_lines(self, begin: int, end: int) -> int: ...


class _Positioned(Protocol):
    position: int


PositionLike = Union[int, _Positioned]
RangeOp = Literal["expand", "contract"]


@dataclass(frozen=True, slots=True)
class Range:
    begin: int
    end: int
    type: Optional[RangeType] = RangeType.EXCLUSIVE

    def __iter__(self) -> Iterator[object]:
        return iter((self.begin, self.end, self.type))

    @property
    def size(self) -> int:
        return abs(self.end - self.begin)


def _deref(value: PositionLike) -> int:
    position = getattr(value, "position", value)
    return int(position)  # type: ignore[arg-type]


def _ordered(begin: int, end: int) -> Tuple[int, int]:
    return (begin, end) if begin <= end else (end, begin)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def expand(
    document: LineIndex, begin: PositionLike, end: PositionLike, kind: RangeType
) -> Range:
    kind = RangeType(kind)
    b, e = _deref(begin), _deref(end)
    if kind is RangeType.EXCLUSIVE:
        b, e = _ordered(b, e)
        if b == e or not document.is_bol(e):
            return Range(b, e, RangeType.EXCLUSIVE)
        if document.is_bol(b):
            # Already aligned: lines from b's line through the line before e.
            return Range(b, e, RangeType.LINE)
        return Range(b, e - 1, RangeType.INCLUSIVE)
    if kind is RangeType.INCLUSIVE:
        b, e = _ordered(b, e)
        return Range(b, e + 1, RangeType.INCLUSIVE)
    if kind is RangeType.LINE:
        b, e = _ordered(b, e)
        return Range(
            document.line_beginning(b), document.next_line_beginning(e), RangeType.LINE
        )
    if kind is RangeType.BLOCK:
        b, e = _ordered(b, e)
        return Range(b, e + 1, RangeType.BLOCK)
    raise ValueError(f"Unknown range type {kind!r}")


def contract(
    document: LineIndex, begin: PositionLike, end: PositionLike, kind: RangeType
) -> Range:
    del document
    kind = RangeType(kind)
    b, e = _deref(begin), _deref(end)
    if kind is RangeType.EXCLUSIVE:
        return Range(b, e, RangeType.EXCLUSIVE)
    if kind is RangeType.INCLUSIVE:
        b, e = _ordered(b, e)
        return Range(b, e - 1, RangeType.INCLUSIVE)
    if kind is RangeType.LINE:
        b, e = _ordered(b, e)
        return Range(b, max(b, e - 1), RangeType.LINE)
    if kind is RangeType.BLOCK:
        return Range(b, e - 1, RangeType.BLOCK)
    raise ValueError(f"Unknown range type {kind!r}")


def describe(
    document: LineIndex, begin: PositionLike, end: PositionLike, kind: RangeType
) -> str:
    """Human-readable size of the range, e.g. ``"3 characters"``."""

    kind = RangeType(kind)
    b, e = _deref(begin), _deref(end)
    if kind is RangeType.EXCLUSIVE:
        return _plural(abs(e - b), "character")
    if kind is RangeType.INCLUSIVE:
        return _plural(abs(e - b) + 1, "character")
    if kind is RangeType.LINE:
        span = expand(document, b, e, RangeType.LINE)
        return _plural(max(1, document.count_lines(span.begin, span.end)), "line")
    if kind is RangeType.BLOCK:
        rows = abs(document.line_number(e) - document.line_number(b)) + 1
        columns = abs(document.column(e) - document.column(b)) + 1
        return f"{_plural(rows, 'row')} and {_plural(columns, 'column')}"
    raise ValueError(f"Unknown range type {kind!r}")


def transform(
    document: LineIndex,
    begin: PositionLike,
    end: PositionLike,
    kind: Optional[RangeType],
    op: Optional[RangeOp],
) -> Range:
    """Dispatch ``op`` for ``kind``; positions pass through if either is absent."""

    b, e = _deref(begin), _deref(end)
    if kind is None or op is None:
        return Range(b, e, kind)
    if op == "expand":
        return expand(document, b, e, kind)
    if op == "contract":
        return contract(document, b, e, kind)
    raise ValueError(f"Unknown range operation {op!r}")


def block_rows(document: LineIndex, span: Range) -> List[Tuple[int, int]]:
    """Per-line ``(begin, end)`` slices covered by an expanded block range."""

    first, last = span.begin, span.end - 1
    top, bottom = sorted((document.line_number(first), document.line_number(last)))
    left, right = sorted((document.column(first), document.column(last)))
    return [
        (document.position(line, left), document.position(line, right + 1))
        for line in range(top, bottom + 1)
    ]


__all__ = [
    "LineIndex",
    "Range",
    "RangeOp",
    "RangeType",
    "block_rows",
    "contract",
    "describe",
    "expand",
    "transform",
]
