from __future__ import annotations

import pytest

from vicmd.buffer import Buffer, BufferDocument, BufferValidationError, RegisterBank
from vicmd.ranges import RangeType


def test_document_line_index() -> None:
    document = BufferDocument.from_text("ab\ncd")

    assert document.line_count == 2
    assert document.line_number(3) == 1
    assert document.column(4) == 1
    assert document.line_end(0) == 2
    assert document.position(1, 10) == 5
    assert document.is_bol(3)
    assert not document.is_bol(4)


def test_count_lines_with_and_without_trailing_newline() -> None:
    document = BufferDocument.from_text("abc\ndef\nghi")

    assert document.count_lines(0, 8) == 2
    assert document.count_lines(0, 9) == 3
    assert document.count_lines(4, 4) == 0


def test_replace_range_shifts_markers() -> None:
    buffer = Buffer.from_text("hello world")
    after = buffer.marker(6)
    inside = buffer.marker(2)

    delta = buffer.replace_range(0, 5, "hi", label="test")

    assert buffer.text == "hi world"
    assert delta.removed == "hello"
    assert after.position == 3
    assert inside.position == 0


def test_undo_and_redo_restore_text_and_point() -> None:
    buffer = Buffer.from_text("abc", point=1)
    buffer.delete_range(1, 2)
    buffer.goto(0)

    buffer.apply_undo()
    assert buffer.text == "abc"
    assert buffer.point == 1

    buffer.apply_undo(redo=True)
    assert buffer.text == "ac"
    assert buffer.apply_undo(redo=True) is None


def test_replace_range_rejects_out_of_range_positions() -> None:
    buffer = Buffer.from_text("abc")

    with pytest.raises(BufferValidationError):
        buffer.replace_range(-1, 2, "", label="test")
    with pytest.raises(BufferValidationError):
        buffer.get_text_range(0, 10)


def test_discard_marks_buffer() -> None:
    buffer = Buffer.from_text("abc")

    buffer.discard()

    assert buffer.text == ""
    assert buffer.state.discarded


def test_register_bank_numbered_deletes() -> None:
    registers = RegisterBank()

    registers.delete("one\n", RangeType.LINE)
    registers.delete("two\n", RangeType.LINE)
    registers.delete("x", RangeType.EXCLUSIVE)

    assert registers.get("1").text == "two\n"
    assert registers.get("2").text == "one\n"
    assert registers.get("-").text == "x"
    assert registers.get().text == "x"


def test_register_bank_yank_and_append() -> None:
    registers = RegisterBank()

    registers.yank("abc", RangeType.EXCLUSIVE)
    registers.yank("de", RangeType.EXCLUSIVE, name="a")
    registers.yank("f", RangeType.EXCLUSIVE, name="A")

    assert registers.get("0").text == "abc"
    assert registers.get("a").text == "def"
    assert registers.get().text == "def"
