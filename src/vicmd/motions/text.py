"""Word and paragraph motions built on the character-class scanner.

Every motion here returns the signed number of steps it could not take
(0 on success) and leaves point at the furthest boundary reached.
"""

from __future__ import annotations

from typing import Callable

from vicmd.buffer import Buffer
from vicmd.runtime.options import DEFAULT_WORD_CHARS

from .scanner import char_matcher, skip_chars

Matcher = Callable[[str], bool]


def _blank(ch: str) -> bool:
    return ch in " \t"


def _run_class(word_chars: str, bigword: bool) -> Callable[[str], Matcher]:
    """Map a character to the matcher for the run it belongs to."""

    is_word = char_matcher(word_chars)

    def is_punct(ch: str) -> bool:
        return not ch.isspace() and not is_word(ch)

    def is_nonblank(ch: str) -> bool:
        return not ch.isspace()

    def classify(ch: str) -> Matcher:
        if bigword:
            return is_nonblank
        return is_word if is_word(ch) else is_punct

    return classify


def _skip_space_forward(buffer: Buffer) -> None:
    """Skip blanks and newlines, stopping at the start of an empty line."""

    text = buffer.text
    point = buffer.point
    while point < len(text) and text[point].isspace():
        if text[point] == "\n":
            point += 1
            if point < len(text) and text[point] == "\n":
                break
            continue
        point += 1
    buffer.goto(point)


def forward_word_begin(
    buffer: Buffer,
    count: int = 1,
    *,
    word_chars: str = DEFAULT_WORD_CHARS,
    bigword: bool = False,
) -> int:
    """``w``/``W``: move to the start of the ``count``-th next word."""

    if count < 0:
        return -backward_word_begin(
            buffer, -count, word_chars=word_chars, bigword=bigword
        )
    classify = _run_class(word_chars, bigword)
    remaining = count
    while remaining > 0:
        start = buffer.point
        ch = buffer.document.char_at(start)
        if ch and not ch.isspace():
            skip_chars(buffer, classify(ch), 1)
        _skip_space_forward(buffer)
        if buffer.point == start:
            break
        remaining -= 1
    return remaining


def forward_word_end(
    buffer: Buffer,
    count: int = 1,
    *,
    word_chars: str = DEFAULT_WORD_CHARS,
    bigword: bool = False,
) -> int:
    """``e``/``E``: move to the last character of the ``count``-th word end."""

    classify = _run_class(word_chars, bigword)
    text = buffer.text
    remaining = count
    while remaining > 0:
        start = buffer.point
        if start + 1 >= len(text):
            break
        buffer.goto(start + 1)
        skip_chars(buffer, str.isspace, 1)
        ch = buffer.document.char_at(buffer.point)
        if not ch:
            buffer.goto(start)
            break
        skip_chars(buffer, classify(ch), 1)
        buffer.goto(buffer.point - 1)
        remaining -= 1
    return remaining


def current_word_end(
    buffer: Buffer,
    count: int = 1,
    *,
    word_chars: str = DEFAULT_WORD_CHARS,
    bigword: bool = False,
) -> int:
    """Move to the end of the run under point, then ``count - 1`` word ends.

    This is the ``cw`` flavour of ``e``: a word whose last character is
    already under point counts as the first word.
    """

    ch = buffer.document.char_at(buffer.point)
    if not ch or ch.isspace():
        return forward_word_end(
            buffer, count, word_chars=word_chars, bigword=bigword
        )
    skip_chars(buffer, _run_class(word_chars, bigword)(ch), 1)
    buffer.goto(buffer.point - 1)
    return forward_word_end(
        buffer, count - 1, word_chars=word_chars, bigword=bigword
    )


def backward_word_begin(
    buffer: Buffer,
    count: int = 1,
    *,
    word_chars: str = DEFAULT_WORD_CHARS,
    bigword: bool = False,
) -> int:
    """``b``/``B``: move to the start of the ``count``-th previous word."""

    classify = _run_class(word_chars, bigword)
    remaining = count
    while remaining > 0:
        start = buffer.point
        skip_chars(buffer, str.isspace, -1)
        ch = buffer.document.char_at(buffer.point - 1)
        if ch:
            skip_chars(buffer, classify(ch), -1)
        if buffer.point == start:
            break
        remaining -= 1
    return remaining


def move_paragraph(buffer: Buffer, count: int = 1) -> int:
    """Move over ``|count|`` blank-line delimited paragraphs.

    Forward steps land on the first blank line after the paragraph, or the
    buffer end when no blank line follows; backward steps land on the blank
    line before it, or the buffer start. A step has to cross at least one
    non-blank line. One that only passes blank lines still moves point to
    the buffer limit but fails, as does a step that cannot move point, so
    calls at the limit report the whole count as overshoot.
    """

    document = buffer.document
    direction = 1 if count > 0 else -1
    remaining = count
    while remaining != 0:
        start = buffer.point
        line = document.line_number(start)
        if direction > 0:
            while line < document.line_count and document.is_blank_line(line):
                line += 1
            first = line
            while line < document.line_count and not document.is_blank_line(line):
                line += 1
            if line < document.line_count:
                target = document.line_start(line)
            else:
                target = len(document)
        else:
            while line >= 0 and document.is_blank_line(line):
                line -= 1
            first = line
            while line >= 0 and not document.is_blank_line(line):
                line -= 1
            target = document.line_start(line) if line >= 0 else 0
        buffer.goto(target)
        if target == start or line == first:
            break
        remaining -= direction
    return remaining


def first_nonblank(buffer: Buffer, position: int) -> int:
    document = buffer.document
    point = document.line_beginning(position)
    end = document.line_end(position)
    while point < end and _blank(document.char_at(point)):
        point += 1
    return point


__all__ = [
    "backward_word_begin",
    "current_word_end",
    "first_nonblank",
    "forward_word_begin",
    "forward_word_end",
    "move_paragraph",
]
