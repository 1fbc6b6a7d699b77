"""Stand-alone editing commands: ``x``, ``r``, ``p``, the insert entries."""

from __future__ import annotations

from vicmd.keymaps.models import RETURN
from vicmd.modes.base_mode import ActionCall, ModeContext, ModeResult
from vicmd.motions import first_nonblank
from vicmd.ranges import Range, RangeType

from .operators import change_operator, delete_operator


def _line_span(context: ModeContext, count: int) -> Range:
    """Point to the end of the ``count``-th line (``D``/``C``)."""

    document = context.buffer.document
    point = context.buffer.point
    last = document.line_number(point) + count - 1
    end = document.line_end(document.line_start(last))
    return Range(point, max(point, end), RangeType.EXCLUSIVE)


def _chars_right(context: ModeContext, count: int) -> Range:
    document = context.buffer.document
    point = context.buffer.point
    end = min(point + count, document.line_end(point))
    return Range(point, end, RangeType.EXCLUSIVE)


def delete_char(context: ModeContext, call: ActionCall) -> ModeResult:
    span = _chars_right(context, call.n)
    if span.size == 0:
        return ModeResult(consumed=True, status="boundary", overshoot=call.n)
    return delete_operator(context, span, call)


def delete_char_backward(context: ModeContext, call: ActionCall) -> ModeResult:
    document = context.buffer.document
    point = context.buffer.point
    begin = max(document.line_beginning(point), point - call.n)
    if begin == point:
        return ModeResult(consumed=True, status="boundary", overshoot=call.n)
    return delete_operator(context, Range(begin, point, RangeType.EXCLUSIVE), call)


def replace_char(context: ModeContext, call: ActionCall) -> ModeResult:
    """``r{char}``: overwrite ``count`` characters; fails if the line is short."""

    buffer = context.buffer
    span = _chars_right(context, call.n)
    if span.size < call.n or not call.argument:
        short = call.n - span.size
        return ModeResult(consumed=True, status="boundary", overshoot=short)
    if call.argument == RETURN:
        buffer.replace_range(span.begin, span.end, "\n", label="replace_char")
        buffer.goto(span.begin + 1)
    else:
        buffer.replace_range(
            span.begin, span.end, call.argument * call.n, label="replace_char"
        )
        buffer.goto(span.end - 1)
    return ModeResult(consumed=True)


def substitute_char(context: ModeContext, call: ActionCall) -> ModeResult:
    return change_operator(context, _chars_right(context, call.n), call)


def delete_to_eol(context: ModeContext, call: ActionCall) -> ModeResult:
    return delete_operator(context, _line_span(context, call.n), call)


def change_to_eol(context: ModeContext, call: ActionCall) -> ModeResult:
    return change_operator(context, _line_span(context, call.n), call)


def insert_before(context: ModeContext, call: ActionCall) -> ModeResult:
    del call
    del context
    return ModeResult(consumed=True, switch_to="insert")


def insert_after(context: ModeContext, call: ActionCall) -> ModeResult:
    del call
    buffer = context.buffer
    if buffer.point < buffer.document.line_end(buffer.point):
        buffer.goto(buffer.point + 1)
    return ModeResult(consumed=True, switch_to="insert")


def insert_at_nonblank(context: ModeContext, call: ActionCall) -> ModeResult:
    del call
    buffer = context.buffer
    buffer.goto(first_nonblank(buffer, buffer.point))
    return ModeResult(consumed=True, switch_to="insert")


def append_at_eol(context: ModeContext, call: ActionCall) -> ModeResult:
    del call
    buffer = context.buffer
    buffer.goto(buffer.document.line_end(buffer.point))
    return ModeResult(consumed=True, switch_to="insert")


def open_line_below(context: ModeContext, call: ActionCall) -> ModeResult:
    del call
    buffer = context.buffer
    end = buffer.document.line_end(buffer.point)
    buffer.replace_range(end, end, "\n", label="open_line")
    buffer.goto(end + 1)
    return ModeResult(consumed=True, switch_to="insert")


def open_line_above(context: ModeContext, call: ActionCall) -> ModeResult:
    del call
    buffer = context.buffer
    begin = buffer.document.line_beginning(buffer.point)
    buffer.replace_range(begin, begin, "\n", label="open_line")
    buffer.goto(begin)
    return ModeResult(consumed=True, switch_to="insert")


def _paste(context: ModeContext, call: ActionCall, *, after: bool) -> ModeResult:
    buffer = context.buffer
    document = buffer.document
    value = context.registers.get(call.register)
    if not value.text:
        return ModeResult(consumed=True, status="empty", message="register is empty")
    point = buffer.point
    if value.linewise:
        text = value.text * call.n
        if after:
            at = document.next_line_beginning(point)
            if at == len(document) and not document.text.endswith("\n"):
                # Pasting below an unterminated last line.
                text = "\n" + text[:-1]
                buffer.replace_range(at, at, text, label="paste")
                buffer.goto(first_nonblank(buffer, at + 1))
                return ModeResult(consumed=True)
        else:
            at = document.line_beginning(point)
        buffer.replace_range(at, at, text, label="paste")
        buffer.goto(first_nonblank(buffer, at))
        return ModeResult(consumed=True)
    text = value.text * call.n
    at = point
    if after and point < document.line_end(point):
        at = point + 1
    buffer.replace_range(at, at, text, label="paste")
    buffer.goto(at + len(text) - 1)
    return ModeResult(consumed=True)


def paste_after(context: ModeContext, call: ActionCall) -> ModeResult:
    return _paste(context, call, after=True)


def paste_before(context: ModeContext, call: ActionCall) -> ModeResult:
    return _paste(context, call, after=False)


def undo(context: ModeContext, call: ActionCall) -> ModeResult:
    applied = 0
    for _ in range(call.n):
        if context.buffer.apply_undo() is None:
            break
        applied += 1
    if not applied:
        return ModeResult(
            consumed=True, status="boundary", message="already at oldest change"
        )
    return ModeResult(consumed=True, overshoot=call.n - applied)


def redo(context: ModeContext, call: ActionCall) -> ModeResult:
    applied = 0
    for _ in range(call.n):
        if context.buffer.apply_undo(redo=True) is None:
            break
        applied += 1
    if not applied:
        return ModeResult(
            consumed=True, status="boundary", message="already at newest change"
        )
    return ModeResult(consumed=True, overshoot=call.n - applied)


def repeat_last(context: ModeContext, call: ActionCall) -> ModeResult:
    """``.``: replay the last repeatable command, optionally with a new count."""

    if context.executor is None:
        return ModeResult(consumed=True, status="unsupported")
    result = context.executor.repeat(call.count)
    return ModeResult(
        consumed=True,
        status=result.status,
        message=result.message,
        overshoot=result.overshoot,
    )


def discard_buffer(context: ModeContext, call: ActionCall) -> ModeResult:
    del call
    context.buffer.discard()
    return ModeResult(consumed=True, status="discarded")


__all__ = [
    "append_at_eol",
    "change_to_eol",
    "delete_char",
    "delete_char_backward",
    "delete_to_eol",
    "discard_buffer",
    "insert_after",
    "insert_at_nonblank",
    "insert_before",
    "open_line_above",
    "open_line_below",
    "paste_after",
    "paste_before",
    "redo",
    "repeat_last",
    "replace_char",
    "substitute_char",
    "undo",
]
