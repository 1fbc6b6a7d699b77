"""Operator-pending parsing: ``[count] operator [count] [v|V|^V] motion``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from vicmd.errors import UnknownCommand
from vicmd.keymaps import ActionRef, KeymapResolver
from vicmd.keymaps.models import CTRL_V
from vicmd.ranges import RangeType
from vicmd.repeat.tokens import SymbolicToken
from vicmd.runtime.input import KeyItem
from vicmd.runtime.options import EngineOptions
from vicmd.runtime.telemetry import span

from .count import NeedInput, combine_counts, literal_run, split_count

FORCE_KEYS = {"v": "toggle", "V": RangeType.LINE, CTRL_V: RangeType.BLOCK}


@dataclass(frozen=True, slots=True)
class OperatorPlan:
    """Everything needed to run an operator over a motion's range.

    ``motion`` is ``None`` for a doubled operator (``dd``), which acts on
    ``count`` whole lines, or when ``symbolic`` supplies the motion.
    ``motion_index`` is where the motion's keys start inside ``keys``.
    """

    operator: ActionRef
    count: Optional[int]
    keys: Tuple[KeyItem, ...]
    motion: Optional[ActionRef] = None
    symbolic: Optional[SymbolicToken] = None
    argument: Optional[str] = None
    force: Union[RangeType, str, None] = None
    motion_index: int = 0
    remainder: Tuple[KeyItem, ...] = ()

    @property
    def linewise(self) -> bool:
        return self.motion is None and self.symbolic is None


class OperatorPendingParser:
    """Binds an operator and its counts to the motion that follows.

    ``parse`` never blocks: it returns ``NeedInput`` while the keys are a
    valid prefix, and the caller re-invokes it with one more key appended.
    """

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

    def parse(self, keys: Sequence[KeyItem]) -> Union[OperatorPlan, NeedInput]:
        items = tuple(keys)
        with span(
            "operator::parse",
            component="parser",
            metadata={"keys": "".join(k for k in items if isinstance(k, str))},
        ):
            return self._parse(items)

    def _parse(self, items: Tuple[KeyItem, ...]) -> Union[OperatorPlan, NeedInput]:
        first_count, index = split_count(items)
        if index == len(items):
            stage = "count" if first_count is not None else "command"
            return NeedInput(stage=stage, keys=items, count=first_count)

        run = literal_run(items, index)
        result = self.resolver.resolve(self.mode, run)
        if result.status == "miss":
            raise UnknownCommand(run[: result.consumed + 1], mode=self.mode)
        if result.match is None:
            return NeedInput(stage="command", keys=items, count=first_count)
        operator = result.match.action
        if operator.kind != "operator":
            raise ValueError(f"'{operator.id}' is not an operator")
        operator_keys = run[: result.consumed]
        index += result.consumed

        second_count, index = split_count(items, index)
        count = combine_counts(first_count, second_count, self.options)
        pending = NeedInput(stage="motion", keys=items, count=count, operator=operator)

        force: Union[RangeType, str, None] = None
        if index < len(items) and isinstance(items[index], str):
            force = FORCE_KEYS.get(str(items[index]))
            if force is not None:
                index += 1
        if index == len(items):
            return pending

        item = items[index]
        if isinstance(item, SymbolicToken):
            return OperatorPlan(
                operator=operator,
                count=count,
                keys=items[: index + 1],
                symbolic=item,
                force=force,
                motion_index=index,
                remainder=items[index + 1 :],
            )

        run = literal_run(items, index)
        if operator_keys.startswith(run[: len(operator_keys)]):
            if len(run) < len(operator_keys):
                return pending
            end = index + len(operator_keys)
            return OperatorPlan(
                operator=operator,
                count=count,
                keys=items[:end],
                force=force,
                motion_index=index,
                remainder=items[end:],
            )

        result = self.resolver.resolve(self.mode, run)
        if result.status == "miss":
            raise UnknownCommand(
                "".join(str(k) for k in items[: index + result.consumed + 1]),
                mode=self.mode,
            )
        if result.match is None:
            return pending
        motion = result.match.action
        if motion.kind != "motion":
            raise UnknownCommand(
                "".join(str(k) for k in items[: index + result.consumed]),
                mode=self.mode,
            )
        end = index + result.consumed
        argument: Optional[str] = None
        if motion.takes_argument:
            if end == len(items):
                return NeedInput(
                    stage="argument", keys=items, count=count, operator=operator
                )
            if not isinstance(items[end], str):
                raise UnknownCommand(run, mode=self.mode)
            argument = str(items[end])
            end += 1
        return OperatorPlan(
            operator=operator,
            count=count,
            keys=items[:end],
            motion=motion,
            argument=argument,
            force=force,
            motion_index=index,
            remainder=items[end:],
        )


__all__ = ["FORCE_KEYS", "OperatorPendingParser", "OperatorPlan"]
