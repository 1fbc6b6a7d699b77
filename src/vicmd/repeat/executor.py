"""Replay of repeat scripts through the regular dispatch path."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional

from vicmd.errors import RepeatUnsafe
from vicmd.modes.base_mode import ModeResult
from vicmd.runtime import telemetry
from vicmd.runtime.input import VectorInput
from vicmd.runtime.options import EngineOptions

from .recorder import RepeatRecorder
from .tokens import LiteralToken, RepeatInfo, RepeatToken, flatten, normalize, render

if TYPE_CHECKING:  # pragma: no cover
    from vicmd.modes.mode_manager import ModeManager

Classifier = Callable[[object], bool]


def is_unsafe_to_repeat(action: object) -> bool:
    """Default classifier: the action's ``destroys_context`` flag."""

    return bool(getattr(action, "destroys_context", False))


def with_leading_count(info: RepeatInfo, count: int) -> RepeatInfo:
    """Replace the script's leading count with ``count``.

    Only the digits at the very front are touched, so ``2d3w`` with a count
    of 5 becomes ``5d3w``. A script starting with a symbolic token gets a
    literal count in front of it.
    """

    tokens: List[RepeatToken] = list(normalize(info))
    if tokens and isinstance(tokens[0], LiteralToken):
        keys = tokens[0].keys
        digits = 0
        if keys[:1] != "0":
            digits = len(keys) - len(keys.lstrip("0123456789"))
        tokens[0] = LiteralToken(f"{count}{keys[digits:]}")
    else:
        tokens.insert(0, LiteralToken(str(count)))
    return normalize(tokens)


class RepeatExecutor:
    """Feeds a repeat script back into the mode manager.

    ``execute`` replays any script unguarded. ``repeat`` replays the
    recorder's ``last`` script in guarded mode, where ``check`` refuses any
    action the classifier flags as context-destroying.
    """

    def __init__(
        self,
        manager: "ModeManager",
        recorder: RepeatRecorder,
        *,
        classifier: Optional[Classifier] = None,
        options: Optional[EngineOptions] = None,
        logger_name: str | None = None,
    ) -> None:
        self.manager = manager
        self.recorder = recorder
        self.classifier = classifier or is_unsafe_to_repeat
        self.options = options or EngineOptions()
        self._logger_name = logger_name
        self._guarded = False

    @property
    def guarded(self) -> bool:
        return self._guarded

    def check(self, action: object) -> None:
        if not self._guarded or not self.classifier(action):
            return
        action_id = getattr(action, "id", None) or getattr(action, "action_id", "?")
        telemetry.record_event(
            "repeat.unsafe",
            level="warning",
            data={"action": action_id},
            logger_name=self._logger_name,
        )
        raise RepeatUnsafe(str(action_id))

    def execute(self, info: RepeatInfo, count: Optional[int] = None) -> ModeResult:
        return self._run(info, count, guarded=False)

    def repeat(self, count: Optional[int] = None) -> ModeResult:
        """``.``: replay the last change; a count replaces its leading count."""

        info = self.recorder.last
        if not info:
            return ModeResult(
                consumed=True, status="empty", message="nothing to repeat"
            )
        count = self.options.clamp_count(count)
        result = self._run(info, count, guarded=True)
        if count is not None and self.options.repeat_keeps_count:
            self.recorder.replace_last(with_leading_count(info, count))
        return result

    def _run(
        self, info: RepeatInfo, count: Optional[int], *, guarded: bool
    ) -> ModeResult:
        script = normalize(info)
        if count is not None:
            script = with_leading_count(script, count)
        previous = self._guarded
        self._guarded = guarded
        result = ModeResult(consumed=True, status="noop")
        with telemetry.span(
            "repeat::execute",
            logger_name=self._logger_name,
            component="repeat",
            metadata={"keys": render(script), "guarded": guarded},
        ) as handle:
            try:
                with self.recorder.replay():
                    source = VectorInput(flatten(script))
                    while source:
                        result = self.manager.dispatch(source.next())
            finally:
                self._guarded = previous
                if self.manager.pending:
                    handle.note("incomplete script")
                    self.manager.abort()
        return result


__all__ = ["Classifier", "RepeatExecutor", "is_unsafe_to_repeat", "with_leading_count"]
