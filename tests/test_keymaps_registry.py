import pytest

from vicmd.keymaps import (
    ActionRef,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
)
from vicmd.keymaps.defaults import load_default_keymaps
from vicmd.ranges import RangeType


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    mode: str = "normal",
    keys: str = "gg",
    action_id: str = "core.test",
) -> Binding:
    return Binding(id=binding_id, keys=keys, action_id=action_id, mode=mode)


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="normal.gg")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(mode="normal")) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="normal.gg"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="normal.gg.duplicate"))


def test_register_binding_prefix_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="normal.gg"))

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.register_binding(make_binding(binding_id="normal.g", keys="g"))

    assert [c.id for c in excinfo.value.conflicts] == ["normal.gg"]


def test_register_binding_other_mode_does_not_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="normal.gg"))
    registry.register_binding(make_binding(binding_id="visual.gg", mode="visual"))

    assert registry.stats().modes == ("normal", "visual")


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding", keys="gx")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]


def test_register_binding_unknown_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="normal.gg"))


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0


def test_binding_rejects_count_digits() -> None:
    with pytest.raises(ValueError):
        make_binding(binding_id="normal.1d", keys="1d")

    assert make_binding(binding_id="normal.zero", keys="0").keys == "0"


def test_motion_requires_range_type() -> None:
    with pytest.raises(ValueError):
        ActionRef(id="motion.bad", handler=lambda *a: None, kind="motion")

    motion = ActionRef(
        id="motion.ok",
        handler=lambda *a: None,
        kind="motion",
        range_type=RangeType.EXCLUSIVE,
    )
    assert motion.telemetry_name == "motion.ok"


def test_load_default_keymaps_registers_normal_bindings() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    assert registry.get_binding("normal.goto_first_line").keys == "gg"
    assert registry.get_action("operator.delete").kind == "operator"
    assert registry.get_action("edit.discard_buffer").destroys_context
    assert registry.get_action("motion.search_forward").interactive


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(
        registry,
        include_actions=("edit.delete_char",),
        include_bindings=("normal.delete_char",),
    )

    assert registry.stats().binding_count == 1
    assert registry.get_binding("normal.delete_char").action_id == "edit.delete_char"


def test_load_default_keymaps_skips_bindings_of_excluded_actions() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, exclude_actions=("edit.discard_buffer",))

    with pytest.raises(KeyError):
        registry.get_binding("normal.discard_buffer")


def test_load_default_keymaps_extra_bindings() -> None:
    registry = KeymapRegistry()
    custom = Binding(id="normal.custom_delete", keys="Q", action_id="edit.delete_char")

    load_default_keymaps(registry, extra_bindings=(custom,))

    assert registry.get_binding("normal.custom_delete") == custom
