"""Dataclasses describing bound actions and their key sequences."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Literal, Mapping, Optional

from vicmd.ranges import RangeType

ActionKind = Literal["motion", "operator", "command"]

ESCAPE = "\x1b"
ABORT = "\x07"  # ^G
CTRL_R = "\x12"
CTRL_V = "\x16"
BACKSPACE = "\x7f"
RETURN = "\r"


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Callable plus the metadata the dispatcher needs to drive it.

    ``kind`` selects how the normal mode parses what follows the keys:
    motions move point (and type a range), operators wait for a motion,
    commands run on their own. ``takes_argument`` makes the parser read one
    more key as the argument (``r``, ``f``). ``repeatable`` actions start a
    recording session; ``interactive`` ones record a symbolic token instead
    of their keys; ``destroys_context`` marks actions the guarded repeat
    refuses to run.
    """

    id: str
    handler: Callable[..., object]
    kind: ActionKind = "command"
    range_type: Optional[RangeType] = None
    takes_argument: bool = False
    repeatable: bool = False
    interactive: bool = False
    destroys_context: bool = False
    description: str = ""
    telemetry_name: str | None = None
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        if self.kind == "motion" and self.range_type is None:
            raise ValueError(f"Motion '{self.id}' needs a range_type")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        if self.telemetry_name is None:
            object.__setattr__(self, "telemetry_name", self.id)

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key sequence with an action in one mode."""

    id: str
    keys: str
    action_id: str
    mode: str = "normal"
    description: str = ""
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.keys:
            raise ValueError(f"binding '{self.id}' needs at least one key")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        if self.keys[0].isdigit() and self.keys != "0":
            raise ValueError(f"binding '{self.id}' would shadow count digits")

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(self.keys)


__all__ = [
    "ABORT",
    "ActionKind",
    "ActionRef",
    "BACKSPACE",
    "Binding",
    "CTRL_R",
    "CTRL_V",
    "ESCAPE",
    "RETURN",
]
