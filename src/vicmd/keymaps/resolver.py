"""Trie-based command table lookup with prefix matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Sequence

from vicmd.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(slots=True)
class TrieNode:
    """Single trie node holding at most one binding and its child keys."""

    binding_id: Optional[str] = None
    children: Dict[str, "TrieNode"] = field(default_factory=dict)

    def child(self, key: str) -> "TrieNode":
        return self.children.setdefault(key, TrieNode())

    def next_keys(self) -> tuple[str, ...]:
        return tuple(sorted(self.children))


@dataclass(slots=True)
class KeymapTrie:
    """Concrete trie built for a given mode."""

    mode: str
    root: TrieNode = field(default_factory=TrieNode)

    def add_binding(self, binding: Binding) -> None:
        node = self.root
        for key in binding.tokens:
            node = node.child(key)
        node.binding_id = binding.id


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome of looking up a key prefix.

    On ``"match"`` only the first ``consumed`` keys belong to the command;
    the caller owns whatever follows. ``"pending"`` means every key was
    consumed and more could complete a binding.
    """

    status: Literal["match", "pending", "miss"]
    match: Optional[ResolutionMatch] = None
    consumed: int = 0
    next_expected: tuple[str, ...] = ()


class KeymapResolver:
    """Builds mode-specific tries and resolves key prefixes against them."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._cache: Dict[str, tuple[int, KeymapTrie]] = {}

    @property
    def registry(self) -> KeymapRegistry:
        return self._registry

    def resolve(self, mode: str, keys: Sequence[str]) -> ResolutionResult:
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "length": len(keys)},
        ) as handle:
            node = self._ensure_trie(mode).root
            consumed = 0
            for key in keys:
                child = node.children.get(key)
                if child is None:
                    handle.add_metadata("status", "miss")
                    return ResolutionResult(status="miss", consumed=consumed)
                node = child
                consumed += 1
                if node.binding_id is not None:
                    binding = self._registry.get_binding(node.binding_id)
                    action = self._registry.get_action(binding.action_id)
                    handle.add_metadata("status", "match")
                    handle.add_metadata("binding_id", binding.id)
                    return ResolutionResult(
                        status="match",
                        match=ResolutionMatch(binding=binding, action=action),
                        consumed=consumed,
                    )

            if consumed and node.children:
                handle.add_metadata("status", "pending")
                return ResolutionResult(
                    status="pending", consumed=consumed, next_expected=node.next_keys()
                )
            handle.add_metadata("status", "miss")
            return ResolutionResult(status="miss", consumed=consumed)

    def lookup(self, mode: str, keys: str) -> Optional[ResolutionMatch]:
        """Exact lookup of a complete key sequence."""

        result = self.resolve(mode, keys)
        if result.status == "match" and result.consumed == len(keys):
            return result.match
        return None

    def _ensure_trie(self, mode: str) -> KeymapTrie:
        revision = self._registry.revision()
        cached = self._cache.get(mode)
        if cached and cached[0] == revision:
            return cached[1]

        trie = KeymapTrie(mode=mode)
        for binding in self._registry.iter_bindings(mode):
            trie.add_binding(binding)
        self._cache[mode] = (revision, trie)
        return trie


__all__ = [
    "KeymapResolver",
    "ResolutionMatch",
    "ResolutionResult",
]
