"""Top-level command parsing and the blocking reader built on it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from vicmd.keymaps import ActionRef, KeymapResolver
from vicmd.repeat.tokens import SymbolicToken
from vicmd.runtime.input import InputSource, KeyItem
from vicmd.runtime.options import EngineOptions

from .count import CountCommandExtractor, NeedInput, split_count
from .operator import OperatorPendingParser, OperatorPlan


@dataclass(frozen=True, slots=True)
class Invocation:
    """A fully parsed command ready to dispatch.

    Exactly one of ``action`` and ``symbolic`` is set. ``plan`` is present
    when ``action`` is an operator.
    """

    keys: Tuple[KeyItem, ...]
    count: Optional[int] = None
    action: Optional[ActionRef] = None
    symbolic: Optional[SymbolicToken] = None
    argument: Optional[str] = None
    plan: Optional[OperatorPlan] = None
    remainder: Tuple[KeyItem, ...] = ()

    @property
    def action_id(self) -> str:
        if self.action is not None:
            return self.action.id
        if self.symbolic is None:
            raise TypeError("Invocation carries neither an action nor a token")
        return self.symbolic.action_id


ParseOutcome = Union[Invocation, NeedInput]


class CommandParser:
    """Parses ``[count] (motion | operator [count] motion | command)``."""

    def __init__(
        self,
        resolver: KeymapResolver,
        *,
        mode: str = "normal",
        options: Optional[EngineOptions] = None,
    ) -> None:
        self.options = options or EngineOptions()
        self.extractor = CountCommandExtractor(
            resolver, mode=mode, options=self.options
        )
        self.operators = OperatorPendingParser(
            resolver, mode=mode, options=self.options
        )

    def parse(self, keys: Sequence[KeyItem]) -> ParseOutcome:
        items = tuple(keys)
        count, index = split_count(items)
        if index < len(items) and isinstance(items[index], SymbolicToken):
            return Invocation(
                keys=items[: index + 1],
                count=self.options.clamp_count(count),
                symbolic=items[index],  # type: ignore[arg-type]
                remainder=items[index + 1 :],
            )

        outcome = self.extractor.feed(items)
        if isinstance(outcome, NeedInput):
            return outcome
        action = outcome.command
        if action.kind == "operator":
            plan = self.operators.parse(items)
            if isinstance(plan, NeedInput):
                return plan
            return Invocation(
                keys=plan.keys,
                count=plan.count,
                action=action,
                plan=plan,
                remainder=plan.remainder,
            )

        end = index + len(outcome.consumed)
        argument: Optional[str] = None
        if action.takes_argument:
            if end == len(items):
                return NeedInput(
                    stage="argument", keys=items, count=outcome.count, operator=None
                )
            if not isinstance(items[end], str):
                raise TypeError(f"'{action.id}' needs a key argument")
            argument = str(items[end])
            end += 1
        return Invocation(
            keys=items[:end],
            count=outcome.count,
            action=action,
            argument=argument,
            remainder=items[end:],
        )


def read_command(parser: CommandParser, source: InputSource) -> Invocation:
    """Pull keys from ``source`` one at a time until they form a command."""

    keys: List[KeyItem] = []
    while True:
        keys.append(source.next())
        outcome = parser.parse(keys)
        if isinstance(outcome, Invocation):
            return outcome


__all__ = ["CommandParser", "Invocation", "ParseOutcome", "read_command"]
