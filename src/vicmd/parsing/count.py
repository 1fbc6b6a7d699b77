"""Count-and-command extraction from a raw key string."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, NamedTuple, Optional, Sequence, Tuple, Union

from vicmd.errors import IncompleteCount, UnknownCommand
from vicmd.keymaps import ActionRef, KeymapResolver
from vicmd.runtime.input import KeyItem
from vicmd.runtime.options import EngineOptions

Stage = Literal["count", "command", "motion", "argument"]


class ParsedCommand(NamedTuple):
    """A count (or ``None``), the command it applies to, and the keys around it.

    ``consumed`` holds the keys bound to ``command`` (the count excluded);
    ``remainder`` is whatever followed, or ``None``.
    """

    count: Optional[int]
    command: ActionRef
    consumed: str
    remainder: Optional[str]


@dataclass(frozen=True, slots=True)
class NeedInput:
    """Suspend result: the keys so far are a valid prefix but not a command."""

    stage: Stage
    keys: Tuple[KeyItem, ...]
    count: Optional[int] = None
    operator: Optional[ActionRef] = None
    expected: Tuple[str, ...] = ()


def split_count(keys: Sequence[KeyItem], start: int = 0) -> Tuple[Optional[int], int]:
    """Read a count starting at ``start``; returns ``(count, index after it)``.

    A count must start with a non-zero digit, so a lone ``0`` is left for the
    beginning-of-line motion.
    """

    digits = literal_run(keys, start)
    index = start
    if digits[:1] in tuple("123456789"):
        while index - start < len(digits) and digits[index - start].isdigit():
            index += 1
    if index == start:
        return None, start
    return int("".join(str(key) for key in keys[start:index])), index


def combine_counts(
    first: Optional[int], second: Optional[int], options: Optional[EngineOptions] = None
) -> Optional[int]:
    if first is None and second is None:
        return None
    count = (first or 1) * (second or 1)
    return (options or EngineOptions()).clamp_count(count)


def literal_run(keys: Sequence[KeyItem], start: int) -> str:
    """Consecutive string keys from ``start`` up to the first symbolic item."""

    run = []
    for key in keys[start:]:
        if not isinstance(key, str):
            break
        run.append(key)
    return "".join(run)


class CountCommandExtractor:
    """Splits ``[count] command`` off the front of a key sequence."""

    def __init__(
        self,
        resolver: KeymapResolver,
        *,
        mode: str = "normal",
        options: Optional[EngineOptions] = None,
    ) -> None:
        self.resolver = resolver
        self.mode = mode
        self.options = options or EngineOptions()

    def feed(self, keys: Sequence[KeyItem]) -> Union[ParsedCommand, NeedInput]:
        items = tuple(keys)
        count, index = split_count(items)
        count = self.options.clamp_count(count)
        if index == len(items):
            stage: Stage = "count" if count is not None else "command"
            return NeedInput(stage=stage, keys=items, count=count)

        run = literal_run(items, index)
        if not run:
            raise TypeError("symbolic items are dispatched before extraction")
        result = self.resolver.resolve(self.mode, run)
        if result.status == "miss":
            raise UnknownCommand(run[: result.consumed + 1], mode=self.mode)
        if result.status == "pending" or result.match is None:
            return NeedInput(
                stage="command",
                keys=items,
                count=count,
                expected=result.next_expected,
            )
        consumed = run[: result.consumed]
        rest = items[index + result.consumed :]
        remainder = "".join(str(key) for key in rest) if rest else None
        return ParsedCommand(count, result.match.action, consumed, remainder)


def extract_count(
    keys: str,
    resolver: Optional[KeymapResolver] = None,
    *,
    mode: str = "normal",
) -> ParsedCommand:
    """One-shot extraction treating the end of ``keys`` as the end of input.

    Raises ``IncompleteCount`` for digits with no command and
    ``UnknownCommand`` when nothing bound matches.
    """

    if resolver is None:
        from vicmd.keymaps.defaults import default_resolver

        resolver = default_resolver()
    outcome = CountCommandExtractor(resolver, mode=mode).feed(tuple(keys))
    if isinstance(outcome, NeedInput):
        if outcome.stage == "count":
            raise IncompleteCount(keys)
        raise UnknownCommand(keys, mode=mode)
    return outcome


__all__ = [
    "CountCommandExtractor",
    "NeedInput",
    "ParsedCommand",
    "Stage",
    "combine_counts",
    "extract_count",
    "literal_run",
    "split_count",
]
