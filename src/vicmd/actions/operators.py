"""Operators: delete, change and yank over an expanded range."""

from __future__ import annotations

from typing import List, Tuple

from vicmd.modes.base_mode import ActionCall, ModeContext, ModeResult
from vicmd.motions import first_nonblank
from vicmd.ranges import Range, RangeType, block_rows, contract, describe


def span_text(context: ModeContext, span: Range) -> str:
    """Text an operator acts on; block rows are joined with newlines."""

    document = context.buffer.document
    if span.type is RangeType.BLOCK:
        return "\n".join(document.text[b:e] for b, e in block_rows(document, span))
    text = document.text[span.begin : span.end]
    if span.type is RangeType.LINE and not text.endswith("\n"):
        text += "\n"
    return text


def span_message(context: ModeContext, span: Range, verb: str) -> str:
    document = context.buffer.document
    kind = span.type or RangeType.EXCLUSIVE
    raw = contract(document, span.begin, span.end, kind)
    return f"{verb} {describe(document, raw.begin, raw.end, kind)}"


def _line_bounds(context: ModeContext, span: Range) -> Tuple[int, int]:
    """Stretch a final unterminated line span back over its leading newline."""

    text = context.buffer.text
    begin, end = span.begin, span.end
    if end == len(text) and begin > 0 and not text[begin:end].endswith("\n"):
        begin -= 1
    return begin, end


def remove_span(context: ModeContext, span: Range, *, label: str) -> None:
    buffer = context.buffer
    if span.type is RangeType.BLOCK:
        rows: List[Tuple[int, int]] = block_rows(buffer.document, span)
        for begin, end in reversed(rows):
            buffer.replace_range(begin, end, "", label=label)
        buffer.goto(rows[0][0])
        return
    if span.type is RangeType.LINE:
        begin, end = _line_bounds(context, span)
        buffer.replace_range(begin, end, "", label=label)
        buffer.goto(first_nonblank(buffer, min(span.begin, len(buffer.text))))
        return
    buffer.replace_range(span.begin, span.end, "", label=label)
    buffer.goto(span.begin)


def delete_operator(context: ModeContext, span: Range, call: ActionCall) -> ModeResult:
    if span.size == 0:
        return ModeResult(consumed=True, status="noop")
    message = span_message(context, span, "deleted")
    context.registers.delete(
        span_text(context, span), span.type or RangeType.EXCLUSIVE, name=call.register
    )
    remove_span(context, span, label="delete")
    return ModeResult(consumed=True, message=message)


def change_operator(context: ModeContext, span: Range, call: ActionCall) -> ModeResult:
    buffer = context.buffer
    kind = span.type or RangeType.EXCLUSIVE
    if span.size:
        context.registers.delete(span_text(context, span), kind, name=call.register)
    if kind is RangeType.LINE:
        # Keep one (empty) line to type into.
        text = buffer.text
        keep_newline = text[span.begin : span.end].endswith("\n")
        buffer.replace_range(
            span.begin, span.end, "\n" if keep_newline else "", label="change"
        )
        buffer.goto(span.begin)
    elif span.size:
        remove_span(context, span, label="change")
    return ModeResult(consumed=True, switch_to="insert")


def yank_operator(context: ModeContext, span: Range, call: ActionCall) -> ModeResult:
    buffer = context.buffer
    document = buffer.document
    kind = span.type or RangeType.EXCLUSIVE
    context.registers.yank(span_text(context, span), kind, name=call.register)
    if kind is RangeType.LINE:
        top = document.line_number(span.begin)
        if top < document.line_number(buffer.point):
            buffer.goto(document.position(top, document.column(buffer.point)))
    else:
        buffer.goto(min(span.begin, span.end))
    return ModeResult(consumed=True, message=span_message(context, span, "yanked"))


__all__ = [
    "change_operator",
    "delete_operator",
    "remove_span",
    "span_message",
    "span_text",
    "yank_operator",
]
