"""Base classes and shared value types for editor modes."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Callable, Dict, Mapping, Optional

from vicmd.buffer import Buffer, RegisterBank
from vicmd.ranges import RangeType
from vicmd.repeat.recorder import RepeatRecorder
from vicmd.runtime.options import EngineOptions

if TYPE_CHECKING:  # pragma: no cover
    from vicmd.keymaps import ActionRef
    from vicmd.repeat.executor import RepeatExecutor
    from vicmd.repeat.tokens import SymbolicToken


@dataclass(slots=True)
class ModeResult:
    """Result returned from ``Mode.handle_key``."""

    consumed: bool
    switch_to: Optional[str] = None
    status: str = "ok"
    message: Optional[str] = None
    overshoot: int = 0


@dataclass(frozen=True, slots=True)
class ActionCall:
    """Arguments an action handler receives from the dispatcher."""

    count: Optional[int] = None
    argument: Optional[str] = None
    operator: Optional["ActionRef"] = None
    state: Mapping[str, object] = field(default_factory=dict)
    register: str = '"'

    @property
    def n(self) -> int:
        return self.count or 1

    @property
    def operator_pending(self) -> bool:
        return self.operator is not None

    def with_state(self, state: Mapping[str, object]) -> "ActionCall":
        return replace(self, state=dict(state))


@dataclass(frozen=True, slots=True)
class MotionResult:
    """Where a motion ended and how far short of its count it fell.

    ``begin`` overrides the range start (point by default); ``range_type``
    overrides the action's declared type; ``state`` carries what an
    interactive motion resolved so it can be recorded symbolically.
    """

    target: int
    overshoot: int = 0
    begin: Optional[int] = None
    range_type: Optional[RangeType] = None
    state: Mapping[str, object] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.overshoot != 0


@dataclass(slots=True)
class ModeContext:
    """Shared services every mode and action can access."""

    buffer: Buffer
    registers: RegisterBank
    bus: "ModeBus"
    recorder: RepeatRecorder = field(default_factory=RepeatRecorder)
    options: EngineOptions = field(default_factory=EngineOptions)
    executor: Optional["RepeatExecutor"] = None
    extras: Dict[str, object] = field(default_factory=dict)

    def prompt(self, label: str) -> str:
        """Ask the host for a line of input (search patterns and the like)."""

        handler = self.extras.get("prompt")
        if not callable(handler):
            raise RuntimeError("ModeContext.extras missing 'prompt' callable")
        return str(handler(label))

    def check_repeat_safe(self, action: "ActionRef | SymbolicToken") -> None:
        if self.executor is not None:
            self.executor.check(action)


class ModeBus:
    """Minimal event bus letting modes exchange structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


class Mode:
    """Base class all concrete editor modes inherit from."""

    name: str = "mode"

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    def on_enter(self, previous: Optional[str]) -> None:  # pragma: no cover
        del previous

    def on_exit(self, next_mode: Optional[str]) -> None:  # pragma: no cover
        del next_mode

    def handle_key(self, key: str) -> ModeResult:  # pragma: no cover - abstract
        raise NotImplementedError

    def handle_symbolic(self, token: "SymbolicToken") -> ModeResult:
        """Run a symbolic repeat token; modes without a use for one ignore it."""

        del token
        return ModeResult(consumed=False, status="ignored")

    def abort(self) -> ModeResult:
        """Drop any partial input; invoked for the host's abort signal."""

        return ModeResult(consumed=True, status="abort")
