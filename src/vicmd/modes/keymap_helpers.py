"""Helper utilities for keymap-driven modes."""

from __future__ import annotations

from vicmd.keymaps import ActionRef, KeymapResolver

from .base_mode import ModeContext


def require_keymap_resolver(context: ModeContext) -> KeymapResolver:
    resolver = context.extras.get("keymap_resolver")
    if not isinstance(resolver, KeymapResolver):
        raise RuntimeError("ModeContext.extras missing 'keymap_resolver'")
    return resolver


def lookup_action(context: ModeContext, action_id: str) -> ActionRef:
    """Registered action behind a symbolic token's ``action_id``."""

    return require_keymap_resolver(context).registry.get_action(action_id)


__all__ = ["lookup_action", "require_keymap_resolver"]
