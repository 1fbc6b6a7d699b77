"""Bounded character-class scanning with overshoot reporting."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Callable, Pattern, Union

from vicmd.buffer import Buffer

CharClass = Union[str, Callable[[str], bool]]


@lru_cache(maxsize=64)
def _compile(chars: str) -> Pattern[str]:
    return re.compile(f"[{chars}]")


def char_matcher(char_class: CharClass) -> Callable[[str], bool]:
    if callable(char_class):
        return char_class
    if char_class.startswith("^"):
        inner = _compile(char_class[1:])
        return lambda ch: inner.fullmatch(ch) is None
    pattern = _compile(char_class)
    return lambda ch: pattern.fullmatch(ch) is not None


def skip_chars(buffer: Buffer, char_class: CharClass, direction: int = 1) -> int:
    """Move point over a run of ``char_class``; returns how many chars moved."""

    matches = char_matcher(char_class)
    text = buffer.text
    point = start = buffer.point
    if direction > 0:
        while point < len(text) and matches(text[point]):
            point += 1
    else:
        while point > 0 and matches(text[point - 1]):
            point -= 1
    buffer.goto(point)
    return abs(point - start)


def move_chars(buffer: Buffer, char_class: CharClass, count: int) -> int:
    """Move over ``count`` runs of ``char_class`` (backward when negative).

    Each step skips anything outside the class and then the run inside it,
    and succeeds only if at least one matching character was crossed.
    Returns 0 when every step succeeded, otherwise the signed number of
    unmet steps; point stays at the boundary reached.
    """

    matches = char_matcher(char_class)
    direction = 1 if count > 0 else -1
    remaining = count
    while remaining != 0:
        skip_chars(buffer, lambda ch: not matches(ch), direction)
        if not skip_chars(buffer, matches, direction):
            break
        remaining -= direction
    return remaining


__all__ = ["CharClass", "char_matcher", "move_chars", "skip_chars"]
