"""Built-in normal-mode actions and the keys bound to them."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Sequence

from vicmd.actions import edit as edit_actions
from vicmd.actions import motions as motion_actions
from vicmd.actions import operators as operator_actions
from vicmd.ranges import RangeType

from .models import CTRL_R, ActionRef, Binding
from .registry import KeymapRegistry
from .resolver import KeymapResolver

EXCLUSIVE = RangeType.EXCLUSIVE
INCLUSIVE = RangeType.INCLUSIVE
LINE = RangeType.LINE


def _motion(
    action_id: str, handler, range_type: RangeType, description: str, **extra
) -> ActionRef:
    return ActionRef(
        id=f"motion.{action_id}",
        handler=handler,
        kind="motion",
        range_type=range_type,
        description=description,
        **extra,
    )


def _edit(action_id: str, handler, description: str, **extra) -> ActionRef:
    extra.setdefault("repeatable", True)
    return ActionRef(
        id=f"edit.{action_id}", handler=handler, description=description, **extra
    )


DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    _motion("backward_char", motion_actions.backward_char, EXCLUSIVE, "Left"),
    _motion("forward_char", motion_actions.forward_char, EXCLUSIVE, "Right"),
    _motion(
        "next_line",
        motion_actions.next_line,
        LINE,
        "Down",
        metadata={"keeps_goal": True},
    ),
    _motion(
        "previous_line",
        motion_actions.previous_line,
        LINE,
        "Up",
        metadata={"keeps_goal": True},
    ),
    _motion(
        "beginning_of_line",
        motion_actions.beginning_of_line,
        EXCLUSIVE,
        "First column",
    ),
    _motion(
        "first_nonblank",
        motion_actions.first_nonblank_char,
        EXCLUSIVE,
        "First non-blank character",
    ),
    _motion("end_of_line", motion_actions.end_of_line, INCLUSIVE, "End of line"),
    _motion("forward_word", motion_actions.forward_word, EXCLUSIVE, "Next word"),
    _motion(
        "forward_bigword", motion_actions.forward_bigword, EXCLUSIVE, "Next WORD"
    ),
    _motion(
        "forward_word_end",
        motion_actions.forward_word_end_motion,
        INCLUSIVE,
        "End of word",
    ),
    _motion(
        "forward_bigword_end",
        motion_actions.forward_bigword_end,
        INCLUSIVE,
        "End of WORD",
    ),
    _motion(
        "backward_word", motion_actions.backward_word, EXCLUSIVE, "Previous word"
    ),
    _motion(
        "backward_bigword",
        motion_actions.backward_bigword,
        EXCLUSIVE,
        "Previous WORD",
    ),
    _motion(
        "forward_paragraph",
        motion_actions.forward_paragraph,
        EXCLUSIVE,
        "Next paragraph",
    ),
    _motion(
        "backward_paragraph",
        motion_actions.backward_paragraph,
        EXCLUSIVE,
        "Previous paragraph",
    ),
    _motion("goto_first_line", motion_actions.goto_first_line, LINE, "First line"),
    _motion("goto_last_line", motion_actions.goto_last_line, LINE, "Last line"),
    _motion(
        "find_char",
        motion_actions.find_char,
        INCLUSIVE,
        "Find character",
        takes_argument=True,
    ),
    _motion(
        "find_char_backward",
        motion_actions.find_char_backward,
        EXCLUSIVE,
        "Find character backward",
        takes_argument=True,
    ),
    _motion(
        "till_char",
        motion_actions.till_char,
        INCLUSIVE,
        "Till character",
        takes_argument=True,
    ),
    _motion(
        "till_char_backward",
        motion_actions.till_char_backward,
        EXCLUSIVE,
        "Till character backward",
        takes_argument=True,
    ),
    _motion(
        "search_forward",
        motion_actions.search_forward,
        EXCLUSIVE,
        "Search forward",
        interactive=True,
    ),
    ActionRef(
        id="operator.delete",
        handler=operator_actions.delete_operator,
        kind="operator",
        repeatable=True,
        description="Delete",
    ),
    ActionRef(
        id="operator.change",
        handler=operator_actions.change_operator,
        kind="operator",
        repeatable=True,
        description="Change",
        metadata={"word_as_end": True},
    ),
    ActionRef(
        id="operator.yank",
        handler=operator_actions.yank_operator,
        kind="operator",
        description="Yank",
    ),
    _edit("delete_char", edit_actions.delete_char, "Delete character"),
    _edit(
        "delete_char_backward",
        edit_actions.delete_char_backward,
        "Delete character before point",
    ),
    _edit(
        "replace_char",
        edit_actions.replace_char,
        "Replace character",
        takes_argument=True,
    ),
    _edit("substitute_char", edit_actions.substitute_char, "Substitute character"),
    _edit("delete_to_eol", edit_actions.delete_to_eol, "Delete to end of line"),
    _edit("change_to_eol", edit_actions.change_to_eol, "Change to end of line"),
    _edit("insert_before", edit_actions.insert_before, "Insert before point"),
    _edit("insert_after", edit_actions.insert_after, "Append after point"),
    _edit(
        "insert_at_nonblank",
        edit_actions.insert_at_nonblank,
        "Insert at first non-blank",
    ),
    _edit("append_at_eol", edit_actions.append_at_eol, "Append at end of line"),
    _edit("open_line_below", edit_actions.open_line_below, "Open line below"),
    _edit("open_line_above", edit_actions.open_line_above, "Open line above"),
    _edit("paste_after", edit_actions.paste_after, "Put after point"),
    _edit("paste_before", edit_actions.paste_before, "Put before point"),
    _edit("undo", edit_actions.undo, "Undo", repeatable=False),
    _edit("redo", edit_actions.redo, "Redo", repeatable=False),
    _edit(
        "repeat_last",
        edit_actions.repeat_last,
        "Repeat last change",
        repeatable=False,
    ),
    _edit(
        "discard_buffer",
        edit_actions.discard_buffer,
        "Discard the buffer and quit",
        repeatable=False,
        destroys_context=True,
    ),
)

_KEYS: tuple[tuple[str, str], ...] = (
    ("h", "motion.backward_char"),
    ("l", "motion.forward_char"),
    ("j", "motion.next_line"),
    ("k", "motion.previous_line"),
    ("0", "motion.beginning_of_line"),
    ("^", "motion.first_nonblank"),
    ("$", "motion.end_of_line"),
    ("w", "motion.forward_word"),
    ("W", "motion.forward_bigword"),
    ("e", "motion.forward_word_end"),
    ("E", "motion.forward_bigword_end"),
    ("b", "motion.backward_word"),
    ("B", "motion.backward_bigword"),
    ("}", "motion.forward_paragraph"),
    ("{", "motion.backward_paragraph"),
    ("gg", "motion.goto_first_line"),
    ("G", "motion.goto_last_line"),
    ("f", "motion.find_char"),
    ("F", "motion.find_char_backward"),
    ("t", "motion.till_char"),
    ("T", "motion.till_char_backward"),
    ("/", "motion.search_forward"),
    ("d", "operator.delete"),
    ("c", "operator.change"),
    ("y", "operator.yank"),
    ("x", "edit.delete_char"),
    ("X", "edit.delete_char_backward"),
    ("r", "edit.replace_char"),
    ("s", "edit.substitute_char"),
    ("D", "edit.delete_to_eol"),
    ("C", "edit.change_to_eol"),
    ("i", "edit.insert_before"),
    ("a", "edit.insert_after"),
    ("I", "edit.insert_at_nonblank"),
    ("A", "edit.append_at_eol"),
    ("o", "edit.open_line_below"),
    ("O", "edit.open_line_above"),
    ("p", "edit.paste_after"),
    ("P", "edit.paste_before"),
    ("u", "edit.undo"),
    (CTRL_R, "edit.redo"),
    (".", "edit.repeat_last"),
    ("ZQ", "edit.discard_buffer"),
)

DEFAULT_BINDINGS: tuple[Binding, ...] = tuple(
    Binding(
        id=f"normal.{action_id.split('.', 1)[1]}",
        keys=keys,
        action_id=action_id,
        mode="normal",
    )
    for keys, action_id in _KEYS
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_actions: Sequence[str] | None = None,
    exclude_actions: Sequence[str] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register the built-in actions and normal-mode bindings."""

    allowed_actions = _build_filters(include_actions, exclude_actions)
    allowed_bindings = _build_filters(include_bindings, exclude_bindings)

    loaded: set[str] = set()
    for action in DEFAULT_ACTIONS:
        if not _selected(action.id, allowed_actions):
            continue
        registry.register_action(action, replace=replace)
        loaded.add(action.id)

    for binding in DEFAULT_BINDINGS:
        if not _selected(binding.id, allowed_bindings):
            continue
        if binding.action_id not in loaded:
            continue
        registry.register_binding(binding, replace=replace)

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=replace)


@lru_cache(maxsize=1)
def default_resolver() -> KeymapResolver:
    """Shared resolver over the default keymaps, built on first use."""

    registry = KeymapRegistry()
    load_default_keymaps(registry)
    return KeymapResolver(registry)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    if item_id in exclude:
        return False
    return True


__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "default_resolver",
    "load_default_keymaps",
]
