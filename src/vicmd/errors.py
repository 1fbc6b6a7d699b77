"""Exceptions raised by the command engine."""

from __future__ import annotations

from typing import Sequence


def _render(keys: Sequence[object]) -> str:
    return "".join(key if isinstance(key, str) else f"<{key!r}>" for key in keys)


class VicmdError(RuntimeError):
    """Base class for engine errors surfaced to the interactive caller."""


class UnknownCommand(VicmdError):
    """Raised when a key sequence resolves to nothing bound."""

    def __init__(self, keys: Sequence[object], *, mode: str = "normal") -> None:
        self.keys = _render(keys)
        self.mode = mode
        super().__init__(f"No command bound to '{self.keys}' in {mode} mode")


class IncompleteCount(VicmdError):
    """Raised when a count is typed without a command to apply it to."""

    def __init__(self, keys: Sequence[object]) -> None:
        self.keys = _render(keys)
        super().__init__(f"Count '{self.keys}' is not followed by a command")


class RepeatUnsafe(VicmdError):
    """Raised by the guarded repeat when a replayed action destroys context."""

    def __init__(self, action_id: str) -> None:
        self.action_id = action_id
        super().__init__(f"Refusing to repeat context-destroying action '{action_id}'")


__all__ = ["IncompleteCount", "RepeatUnsafe", "UnknownCommand", "VicmdError"]
