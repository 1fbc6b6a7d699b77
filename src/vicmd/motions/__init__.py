"""Scanner-based motions."""

from .scanner import CharClass, char_matcher, move_chars, skip_chars
from .text import (
    backward_word_begin,
    current_word_end,
    first_nonblank,
    forward_word_begin,
    forward_word_end,
    move_paragraph,
)

__all__ = [
    "CharClass",
    "backward_word_begin",
    "char_matcher",
    "current_word_end",
    "first_nonblank",
    "forward_word_begin",
    "forward_word_end",
    "move_chars",
    "move_paragraph",
    "skip_chars",
]
