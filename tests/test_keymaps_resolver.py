from __future__ import annotations

from vicmd.keymaps import ActionRef, Binding, KeymapRegistry, KeymapResolver


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    mode: str = "normal",
    keys: str = "gg",
    action_id: str = "core.test",
) -> Binding:
    return Binding(id=binding_id, keys=keys, action_id=action_id, mode=mode)


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_exact_sequence() -> None:
    binding = make_binding("normal.gg")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve("normal", ("g", "g"))

    assert result.status == "match"
    assert result.consumed == 2
    assert result.match is not None
    assert result.match.binding.id == binding.id


def test_resolver_reports_pending_for_prefix() -> None:
    resolver = KeymapResolver(build_registry([make_binding("normal.gg")]))

    result = resolver.resolve("normal", ("g",))

    assert result.status == "pending"
    assert result.next_expected == ("g",)


def test_resolver_match_leaves_trailing_keys() -> None:
    binding = make_binding("normal.d", keys="d", action_id="operator.delete")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve("normal", "dw")

    assert result.status == "match"
    assert result.consumed == 1


def test_resolver_miss_reports_consumed_prefix() -> None:
    resolver = KeymapResolver(build_registry([make_binding("normal.gg")]))

    result = resolver.resolve("normal", "gx")

    assert result.status == "miss"
    assert result.consumed == 1
    assert resolver.resolve("insert", "gg").status == "miss"


def test_resolver_lookup_requires_complete_sequence() -> None:
    binding = make_binding("normal.d", keys="d", action_id="operator.delete")
    resolver = KeymapResolver(build_registry([binding]))

    assert resolver.lookup("normal", "dw") is None
    match = resolver.lookup("normal", "d")
    assert match is not None
    assert match.action.id == "operator.delete"


def test_resolver_cache_refreshes_on_revision() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)

    miss = resolver.resolve("normal", ("x",))
    assert miss.status == "miss"

    new_binding = make_binding("normal.x", keys="x", action_id="core.x")
    registry.register_action(make_action("core.x"))
    registry.register_binding(new_binding)

    match = resolver.resolve("normal", ("x",))
    assert match.status == "match"
    assert match.match is not None
    assert match.match.binding.id == new_binding.id
