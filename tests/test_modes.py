from __future__ import annotations

from typing import Any, Dict, Optional

import pytest

from vicmd.buffer import Buffer
from vicmd.errors import UnknownCommand
from vicmd.keymaps import ActionRef, Binding, KeymapRegistry, KeymapResolver
from vicmd.keymaps.defaults import load_default_keymaps
from vicmd.keymaps.models import ABORT, BACKSPACE, CTRL_V, ESCAPE
from vicmd.modes import InsertMode, ModeBus, ModeContext, NormalMode
from vicmd.modes.mode_manager import ModeManager
from vicmd.ranges import RangeType
from vicmd.repeat import LiteralToken, render
from vicmd.runtime.input import VectorInput
from vicmd.runtime.options import EngineOptions


def make_context(*, buffer: Optional[Buffer] = None) -> ModeContext:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    resolver = KeymapResolver(registry)
    buffer_obj = buffer or Buffer()
    extras: Dict[str, Any] = {
        "keymap_registry": registry,
        "keymap_resolver": resolver,
    }
    return ModeContext(
        buffer=buffer_obj,
        registers=buffer_obj.registers,
        bus=ModeBus(),
        extras=extras,
    )


def make_manager(text: str = "", **kwargs) -> ModeManager:
    kwargs.setdefault("options", EngineOptions())
    return ModeManager.from_text(text, **kwargs)


def test_normal_mode_enters_insert() -> None:
    mode = NormalMode(make_context())

    result = mode.handle_key("i")

    assert result.switch_to == "insert"
    assert result.consumed is True


def test_normal_mode_pending_sequence() -> None:
    mode = NormalMode(make_context(buffer=Buffer.from_text("a\nb")))

    result = mode.handle_key("g")

    assert result.status == "pending"
    assert mode.pending == ("g",)


def test_normal_mode_requires_resolver() -> None:
    buffer = Buffer()
    context = ModeContext(buffer=buffer, registers=buffer.registers, bus=ModeBus())

    with pytest.raises(RuntimeError):
        NormalMode(context)


def test_insert_mode_escape_returns_to_normal() -> None:
    mode = InsertMode(make_context())

    result = mode.handle_key(ESCAPE)

    assert result.switch_to == "normal"


def test_counted_operator_and_motion() -> None:
    manager = make_manager("abcdefgh")

    manager.feed("2d2l")

    assert manager.buffer.text == "efgh"
    assert render(manager.recorder.last) == "2d2l"


def test_run_reads_from_input_source() -> None:
    manager = make_manager("abcdefgh")

    manager.run(VectorInput("2d2l"))

    assert manager.buffer.text == "efgh"


def test_delete_word() -> None:
    manager = make_manager("foo bar baz")

    manager.feed("dw")

    assert manager.buffer.text == "bar baz"


def test_delete_last_word_of_line_keeps_newline() -> None:
    manager = make_manager("foo bar\nbaz", point=4)

    manager.feed("dw")

    assert manager.buffer.text == "foo \nbaz"


def test_change_word_then_repeat() -> None:
    manager = make_manager("foo bar baz")

    manager.feed(["c", "w", "x", "y", ESCAPE])
    assert manager.buffer.text == "xy bar baz"
    assert manager.buffer.point == 1
    assert manager.recorder.last == (LiteralToken(f"cwxy{ESCAPE}"),)

    manager.feed("w.")

    assert manager.buffer.text == "xy xy baz"
    assert manager.active_mode.name == "normal"


def test_change_single_character_word() -> None:
    manager = make_manager("a b")

    manager.feed(["c", "w", "z", ESCAPE])

    assert manager.buffer.text == "z b"


def test_escape_aborts_pending_command() -> None:
    manager = make_manager("abcdefgh")

    manager.feed("2d")
    assert manager.pending
    result = manager.feed([ESCAPE])

    assert result.status == "abort"
    assert not manager.pending
    manager.feed("x")
    assert manager.buffer.text == "bcdefgh"


def test_abort_key_and_abort_call() -> None:
    manager = make_manager("abc")

    manager.feed(["d", ABORT])
    assert not manager.pending

    manager.feed("d")
    manager.abort()
    assert not manager.pending
    assert manager.buffer.text == "abc"


def test_unknown_command_clears_pending() -> None:
    manager = make_manager("abc")

    with pytest.raises(UnknownCommand):
        manager.feed("dq")

    assert not manager.pending
    assert manager.recorder.last == ()
    manager.feed("x")
    assert manager.buffer.text == "bc"


def test_failed_motion_aborts_operator() -> None:
    manager = make_manager("abc")

    result = manager.feed("dh")

    assert result.status == "boundary"
    assert manager.buffer.text == "abc"
    assert manager.recorder.last == ()


def test_search_operator_repeats_without_prompting() -> None:
    manager = make_manager("foo bar baz bar", prompt=lambda label: "bar")

    manager.feed("d/")
    assert manager.buffer.text == "bar baz bar"
    assert render(manager.recorder.last) == "d<motion.search_forward>"

    def refuse(label: str) -> str:
        raise AssertionError(f"prompted for {label!r} during repeat")

    manager.context.extras["prompt"] = refuse
    manager.feed(".")

    assert manager.buffer.text == "bar"


def test_search_motion_moves_point() -> None:
    manager = make_manager("foo bar", prompt=lambda label: "b.r")

    manager.feed("/")

    assert manager.buffer.point == 4


def test_delete_lines_with_count() -> None:
    manager = make_manager("one\ntwo\nthree\n")

    manager.feed("2dd")

    assert manager.buffer.text == "three\n"
    assert manager.buffer.registers.get().text == "one\ntwo\n"
    assert manager.buffer.registers.get().linewise


def test_delete_unterminated_last_line() -> None:
    manager = make_manager("one\ntwo", point=4)

    manager.feed("dd")

    assert manager.buffer.text == "one"
    assert manager.buffer.registers.get().text == "two\n"
    assert manager.buffer.point == 0


def test_delete_line_motion() -> None:
    manager = make_manager("a\nb\nc")

    manager.feed("dj")

    assert manager.buffer.text == "c"


def test_yank_line_and_paste() -> None:
    manager = make_manager("one\ntwo\n")

    manager.feed("yyp")

    assert manager.buffer.text == "one\none\ntwo\n"
    assert manager.buffer.point == 4


@pytest.mark.parametrize(
    ("keys", "text", "point"), [("xp", "bac", 1), ("xP", "abc", 0)]
)
def test_delete_char_and_paste(keys: str, text: str, point: int) -> None:
    manager = make_manager("abc")

    manager.feed(keys)

    assert manager.buffer.text == text
    assert manager.buffer.point == point


def test_delete_to_end_of_line_settles_point() -> None:
    manager = make_manager("hello world", point=5)

    manager.feed("D")

    assert manager.buffer.text == "hello"
    assert manager.buffer.point == 4


def test_forced_linewise_motion() -> None:
    manager = make_manager("abc\ndef", point=1)

    manager.feed("dVl")

    assert manager.buffer.text == "def"


def test_forced_characterwise_motion() -> None:
    manager = make_manager("abcd\nefgh", point=1)

    manager.feed("dvj")

    assert manager.buffer.text == "afgh"


def test_forced_block_motion() -> None:
    manager = make_manager("abcd\nefgh\n", point=1)

    manager.feed(["d", CTRL_V, "j"])

    assert manager.buffer.text == "acd\negh\n"


def test_forced_block_motion_leftward() -> None:
    manager = make_manager("abcdef", point=3)

    result = manager.feed(["d", CTRL_V, "h"])

    assert result.status == "ok"
    assert manager.buffer.text == "abef"


def test_find_and_till() -> None:
    manager = make_manager("hello world")

    manager.feed("fo")
    assert manager.buffer.point == 4

    manager.feed("0dtw")
    assert manager.buffer.text == "world"


def test_goto_lines() -> None:
    manager = make_manager("a\n  b\nc")

    manager.feed("G")
    assert manager.buffer.point == 6

    manager.feed("2gg")
    assert manager.buffer.point == 4


def test_motion_at_boundary_reports_overshoot() -> None:
    manager = make_manager("abc")

    result = manager.feed("h")

    assert result.status == "boundary"
    assert result.overshoot == 1


def test_insert_keys() -> None:
    manager = make_manager("abc")

    manager.feed(["i", "x", "y", ESCAPE])

    assert manager.buffer.text == "xyabc"
    assert manager.buffer.point == 1


def test_insert_backspace() -> None:
    manager = make_manager("")

    manager.feed(["i", "a", "b", BACKSPACE, ESCAPE])

    assert manager.buffer.text == "a"
    assert manager.buffer.point == 0


def test_open_line_below() -> None:
    manager = make_manager("abc")

    manager.feed(["o", "n", "e", "w", ESCAPE])

    assert manager.buffer.text == "abc\nnew"


def test_append_repeats_on_next_line() -> None:
    manager = make_manager("abc\ndef")

    manager.feed(["A", "!", ESCAPE])
    assert manager.buffer.text == "abc!\ndef"
    assert manager.buffer.point == 3

    manager.feed("j.")

    assert manager.buffer.text == "abc!\ndef!"


def test_undo_and_redo() -> None:
    manager = make_manager("abc")

    manager.feed("x")
    manager.feed("u")
    assert manager.buffer.text == "abc"

    manager.feed(["\x12"])
    assert manager.buffer.text == "bc"


def test_discard_buffer() -> None:
    manager = make_manager("abc")

    result = manager.feed("ZQ")

    assert result.status == "discarded"
    assert manager.buffer.text == ""
    assert manager.buffer.state.discarded


def test_mode_switch_events() -> None:
    manager = make_manager("abc")
    seen: list = []
    manager.context.bus.subscribe("mode.switch", seen.append)

    manager.feed(["i", ESCAPE])

    assert seen == ["insert", "normal"]


def test_register_mode_rejects_duplicates() -> None:
    manager = make_manager("abc")

    with pytest.raises(ValueError):
        manager.register_mode(NormalMode)
    with pytest.raises(KeyError):
        manager.switch_mode("visual")


def test_motion_must_return_motion_result() -> None:
    manager = make_manager("abc")
    registry = manager.keymap_registry
    registry.register_action(
        ActionRef(
            id="motion.broken",
            handler=lambda context, call: None,
            kind="motion",
            range_type=RangeType.EXCLUSIVE,
        )
    )
    registry.register_binding(
        Binding(id="normal.Q", keys="Q", action_id="motion.broken", mode="normal")
    )

    with pytest.raises(TypeError):
        manager.feed("Q")
    with pytest.raises(TypeError):
        manager.feed("dQ")

    assert manager.buffer.text == "abc"
