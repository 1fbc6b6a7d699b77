"""Command table: actions, key bindings and the trie that resolves them.

The built-in table lives in ``vicmd.keymaps.defaults``; it pulls in the
action handlers, so it is imported on its own rather than from here.
"""

from .models import ABORT, ESCAPE, ActionKind, ActionRef, Binding
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult

__all__ = [
    "ABORT",
    "ESCAPE",
    "ActionKind",
    "ActionRef",
    "Binding",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
