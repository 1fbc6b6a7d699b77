"""Engine options shared by parsers, motions and the repeat machinery."""

from __future__ import annotations

from dataclasses import dataclass

from .telemetry import env_flag, env_value

DEFAULT_WORD_CHARS = "A-Za-z0-9_"


@dataclass(frozen=True, slots=True)
class EngineOptions:
    """Tunable behaviour for a single engine instance.

    ``word_chars`` is a regular-expression character set (the text that goes
    between ``[`` and ``]``) used by the word motions. ``max_count`` caps
    typed counts. ``repeat_keeps_count`` makes a counted repeat (``3.``)
    rewrite the stored repeat-info so a later bare ``.`` reuses the count.
    """

    word_chars: str = DEFAULT_WORD_CHARS
    max_count: int = 99999
    repeat_keeps_count: bool = True

    def __post_init__(self) -> None:
        if not self.word_chars:
            raise ValueError("word_chars cannot be empty")
        if self.max_count <= 0:
            raise ValueError("max_count must be positive")

    @classmethod
    def from_env(cls) -> "EngineOptions":
        return cls(
            word_chars=env_value("WORD_CHARS") or DEFAULT_WORD_CHARS,
            max_count=int(env_value("MAX_COUNT") or "99999"),
            repeat_keeps_count=env_flag("REPEAT_KEEPS_COUNT", True),
        )

    def clamp_count(self, count: int | None) -> int | None:
        if count is None:
            return None
        return min(count, self.max_count)


__all__ = ["DEFAULT_WORD_CHARS", "EngineOptions"]
