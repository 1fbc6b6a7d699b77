"""Repeat tokens and the normalization that turns a key log into a script."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, List, Mapping, Tuple, Union


@dataclass(frozen=True, slots=True)
class LiteralToken:
    """Key codes that replay through the normal dispatch path."""

    keys: str

    def __len__(self) -> int:
        return len(self.keys)


@dataclass(frozen=True, slots=True)
class SymbolicToken:
    """Opaque action reference replayed by calling it directly.

    Interactive completions (a prompted search pattern, for instance) cannot
    be reproduced from keys alone, so the recorder stores the resolved
    ``state`` with the handler that consumes it.
    """

    action_id: str
    handler: Callable[..., Any] = field(compare=False)
    state: Mapping[str, Any] = field(default_factory=dict)
    kind: str = "command"
    destroys_context: bool = False

    def __post_init__(self) -> None:
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "state", MappingProxyType(dict(self.state)))

    def __hash__(self) -> int:
        return hash((self.action_id, self.kind))

    def invoke(self, context: Any, call: Any) -> Any:
        """Call the handler with ``call`` carrying the recorded state."""

        return self.handler(context, call.with_state(self.state))


RepeatToken = Union[LiteralToken, SymbolicToken]
RepeatInfo = Tuple[RepeatToken, ...]
RawItem = Union[str, List[str], Tuple[str, ...], RepeatToken]


def _literal_text(item: object) -> str | None:
    if isinstance(item, LiteralToken):
        return item.keys
    if isinstance(item, str):
        return item
    if isinstance(item, (list, tuple)) and all(isinstance(key, str) for key in item):
        return "".join(item)
    return None


def normalize(sequence: Iterable[RawItem]) -> RepeatInfo:
    """Merge every maximal run of literal items into one ``LiteralToken``.

    Strings, key lists and ``LiteralToken`` items count as literal; each
    ``SymbolicToken`` stays on its own, in order. Normalizing a normalized
    script returns it unchanged.
    """

    tokens: List[RepeatToken] = []
    run: List[str] | None = None
    for item in sequence:
        text = _literal_text(item)
        if text is not None:
            if run is None:
                run = []
            run.append(text)
            continue
        if not isinstance(item, SymbolicToken):
            raise TypeError(f"Cannot record {item!r} in a repeat script")
        if run is not None:
            tokens.append(LiteralToken("".join(run)))
            run = None
        tokens.append(item)
    if run is not None:
        tokens.append(LiteralToken("".join(run)))
    return tuple(tokens)


def flatten(info: Iterable[RepeatToken]) -> List[Union[str, SymbolicToken]]:
    """Expand a script into the key items an input source hands out."""

    items: List[Union[str, SymbolicToken]] = []
    for token in info:
        if isinstance(token, LiteralToken):
            items.extend(token.keys)
        else:
            items.append(token)
    return items


def render(info: Iterable[RepeatToken]) -> str:
    return "".join(
        token.keys if isinstance(token, LiteralToken) else f"<{token.action_id}>"
        for token in info
    )


__all__ = [
    "LiteralToken",
    "RawItem",
    "RepeatInfo",
    "RepeatToken",
    "SymbolicToken",
    "flatten",
    "normalize",
    "render",
]
