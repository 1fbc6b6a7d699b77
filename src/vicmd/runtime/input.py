"""Ordered key sources consumed by the blocking command reader."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Deque, Iterable, Protocol, Union

if TYPE_CHECKING:  # pragma: no cover
    from vicmd.repeat.tokens import SymbolicToken

KeyItem = Union[str, "SymbolicToken"]


class InputExhausted(EOFError):
    """Raised when a source has no further keys to hand out."""


class InputSource(Protocol):
    """Anything that can hand out the next key item, blocking if needed."""

    def next(self) -> KeyItem:
        ...


class VectorInput:
    """Pre-recorded key vector, used by tests and by replay."""

    def __init__(self, items: Iterable[KeyItem] = ()) -> None:
        self._items: Deque[KeyItem] = deque()
        self.extend(items)

    def extend(self, items: Iterable[KeyItem]) -> None:
        for item in items:
            if isinstance(item, str) and len(item) != 1:
                # Strings are key vectors; split them into single key codes.
                self._items.extend(item)
            else:
                self._items.append(item)

    def next(self) -> KeyItem:
        if not self._items:
            raise InputExhausted("input source exhausted")
        return self._items.popleft()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


__all__ = ["InputExhausted", "InputSource", "KeyItem", "VectorInput"]
