"""Motion actions: each returns where point should go and any overshoot."""

from __future__ import annotations

import re

from vicmd.modes.base_mode import ActionCall, ModeContext, MotionResult
from vicmd.motions import (
    backward_word_begin,
    current_word_end,
    first_nonblank,
    forward_word_begin,
    forward_word_end,
    move_paragraph,
)
from vicmd.ranges import RangeType


def _last_char(context: ModeContext, position: int) -> int:
    """Rightmost position point may rest on in normal mode."""

    document = context.buffer.document
    begin, end = document.line_beginning(position), document.line_end(position)
    return max(begin, end - 1)


def backward_char(context: ModeContext, call: ActionCall) -> MotionResult:
    point = context.buffer.point
    begin = context.buffer.document.line_beginning(point)
    target = max(begin, point - call.n)
    return MotionResult(target, overshoot=call.n - (point - target))


def forward_char(context: ModeContext, call: ActionCall) -> MotionResult:
    point = context.buffer.point
    document = context.buffer.document
    limit = document.line_end(point)
    if not call.operator_pending:
        limit = _last_char(context, point)
    target = max(point, min(limit, point + call.n))
    return MotionResult(target, overshoot=call.n - (target - point))


def _vertical(context: ModeContext, lines: int) -> MotionResult:
    buffer = context.buffer
    document = buffer.document
    point = buffer.point
    line = document.line_number(point)
    goal = buffer.state.goal_column
    if goal is None:
        goal = document.column(point)
    wanted = line + lines
    reached = max(0, min(document.line_count - 1, wanted))
    target = document.position(reached, goal)
    buffer.state.goal_column = goal
    return MotionResult(target, overshoot=wanted - reached)


def next_line(context: ModeContext, call: ActionCall) -> MotionResult:
    return _vertical(context, call.n)


def previous_line(context: ModeContext, call: ActionCall) -> MotionResult:
    return _vertical(context, -call.n)


def beginning_of_line(context: ModeContext, call: ActionCall) -> MotionResult:
    del call
    point = context.buffer.point
    return MotionResult(context.buffer.document.line_beginning(point))


def first_nonblank_char(context: ModeContext, call: ActionCall) -> MotionResult:
    del call
    return MotionResult(first_nonblank(context.buffer, context.buffer.point))


def end_of_line(context: ModeContext, call: ActionCall) -> MotionResult:
    document = context.buffer.document
    line = document.line_number(context.buffer.point)
    wanted = line + call.n - 1
    reached = min(document.line_count - 1, wanted)
    begin = document.line_start(reached)
    end = document.line_end(begin)
    if begin == end:
        # Empty line: an inclusive range would swallow the newline.
        return MotionResult(
            begin, overshoot=wanted - reached, range_type=RangeType.EXCLUSIVE
        )
    return MotionResult(end - 1, overshoot=wanted - reached)


def _word_chars(context: ModeContext) -> str:
    return context.options.word_chars


def _forward_word(
    context: ModeContext, call: ActionCall, bigword: bool
) -> MotionResult:
    buffer = context.buffer
    document = buffer.document
    origin = buffer.point
    operator = call.operator
    if operator is not None and operator.metadata.get("word_as_end"):
        char = document.char_at(origin)
        if char and not char.isspace():
            overshoot = current_word_end(
                buffer, call.n, word_chars=_word_chars(context), bigword=bigword
            )
            return MotionResult(
                buffer.point, overshoot, range_type=RangeType.INCLUSIVE
            )

    overshoot = forward_word_begin(
        buffer, call.n, word_chars=_word_chars(context), bigword=bigword
    )
    target = buffer.point
    if operator is None:
        return MotionResult(min(target, _last_char(context, target)), overshoot)
    bol = document.line_beginning(target)
    if (
        document.line_number(target) > document.line_number(origin)
        and not document.text[bol:target].strip()
    ):
        # The last word moved over ends its line: stop there, not on the next.
        target = bol - 1
    return MotionResult(target, overshoot)


def _word_end(context: ModeContext, call: ActionCall, bigword: bool) -> MotionResult:
    buffer = context.buffer
    origin = buffer.point
    overshoot = forward_word_end(
        buffer, call.n, word_chars=_word_chars(context), bigword=bigword
    )
    target = max(origin, buffer.point)
    return MotionResult(target, overshoot, range_type=RangeType.INCLUSIVE)


def forward_word(context: ModeContext, call: ActionCall) -> MotionResult:
    return _forward_word(context, call, bigword=False)


def forward_bigword(context: ModeContext, call: ActionCall) -> MotionResult:
    return _forward_word(context, call, bigword=True)


def forward_word_end_motion(context: ModeContext, call: ActionCall) -> MotionResult:
    return _word_end(context, call, bigword=False)


def forward_bigword_end(context: ModeContext, call: ActionCall) -> MotionResult:
    return _word_end(context, call, bigword=True)


def backward_word(context: ModeContext, call: ActionCall) -> MotionResult:
    buffer = context.buffer
    overshoot = backward_word_begin(buffer, call.n, word_chars=_word_chars(context))
    return MotionResult(buffer.point, overshoot)


def backward_bigword(context: ModeContext, call: ActionCall) -> MotionResult:
    buffer = context.buffer
    overshoot = backward_word_begin(
        buffer, call.n, word_chars=_word_chars(context), bigword=True
    )
    return MotionResult(buffer.point, overshoot)


def forward_paragraph(context: ModeContext, call: ActionCall) -> MotionResult:
    overshoot = move_paragraph(context.buffer, call.n)
    return MotionResult(context.buffer.point, overshoot)


def backward_paragraph(context: ModeContext, call: ActionCall) -> MotionResult:
    overshoot = move_paragraph(context.buffer, -call.n)
    return MotionResult(context.buffer.point, -overshoot)


def goto_first_line(context: ModeContext, call: ActionCall) -> MotionResult:
    document = context.buffer.document
    line = min(call.n, document.line_count) - 1
    return MotionResult(first_nonblank(context.buffer, document.line_start(line)))


def goto_last_line(context: ModeContext, call: ActionCall) -> MotionResult:
    document = context.buffer.document
    if call.count is None:
        line = document.line_count - 1
    else:
        line = min(call.count, document.line_count) - 1
    return MotionResult(first_nonblank(context.buffer, document.line_start(line)))


def _find(
    context: ModeContext, call: ActionCall, *, forward: bool, till: bool
) -> MotionResult:
    """``f``/``F``/``t``/``T`` within the current line."""

    document = context.buffer.document
    point = context.buffer.point
    char = call.argument or ""
    begin, end = document.line_beginning(point), document.line_end(point)
    line = document.text[begin:end]
    column = point - begin
    if forward:
        columns = range(column + 1, len(line))
    else:
        columns = range(column - 1, -1, -1)
    hits = [index for index in columns if line[index] == char]
    if len(hits) < call.n:
        return MotionResult(point, overshoot=call.n - len(hits))
    index = hits[call.n - 1]
    if till:
        index += -1 if forward else 1
    return MotionResult(begin + index)


def find_char(context: ModeContext, call: ActionCall) -> MotionResult:
    return _find(context, call, forward=True, till=False)


def find_char_backward(context: ModeContext, call: ActionCall) -> MotionResult:
    return _find(context, call, forward=False, till=False)


def till_char(context: ModeContext, call: ActionCall) -> MotionResult:
    return _find(context, call, forward=True, till=True)


def till_char_backward(context: ModeContext, call: ActionCall) -> MotionResult:
    return _find(context, call, forward=False, till=True)


def search_forward(context: ModeContext, call: ActionCall) -> MotionResult:
    """``/``: jump to the ``count``-th match of a prompted regular expression.

    The pattern comes from ``call.state`` when replaying, otherwise from the
    host prompt; it is returned in ``state`` so the dispatcher can record it.
    """

    pattern = call.state.get("pattern")
    if pattern is None:
        pattern = context.prompt("/")
    text = context.buffer.text
    point = context.buffer.point
    state = {"pattern": str(pattern)}
    try:
        compiled = re.compile(str(pattern))
    except re.error:
        return MotionResult(point, overshoot=call.n, state=state)
    position = point
    for step in range(call.n):
        match = compiled.search(text, position + 1)
        if match is None:
            return MotionResult(position, overshoot=call.n - step, state=state)
        position = match.start()
    return MotionResult(position, state=state)


__all__ = [
    "backward_bigword",
    "backward_char",
    "backward_paragraph",
    "backward_word",
    "beginning_of_line",
    "end_of_line",
    "find_char",
    "find_char_backward",
    "first_nonblank_char",
    "forward_bigword",
    "forward_bigword_end",
    "forward_char",
    "forward_paragraph",
    "forward_word",
    "forward_word_end_motion",
    "goto_first_line",
    "goto_last_line",
    "next_line",
    "previous_line",
    "search_forward",
    "till_char",
    "till_char_backward",
]
