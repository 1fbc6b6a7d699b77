"""Insert mode: self-inserting keys until ESC."""

from __future__ import annotations

from vicmd.keymaps.models import ABORT, BACKSPACE, ESCAPE, RETURN
from vicmd.runtime import telemetry

from .base_mode import Mode, ModeContext, ModeResult


class InsertMode(Mode):
    """Types keys into the buffer and appends them to the open recording.

    The command that entered insert mode started a recording session; every
    key typed here (``ESC`` included) is appended to it, and ``ESC`` closes
    it so the whole change replays as one unit.
    """

    name = "insert"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("vicmd.modes.insert")

    def handle_key(self, key: str) -> ModeResult:
        recorder = self.context.recorder
        if key in (ESCAPE, ABORT):
            recorder.append_key(ESCAPE)
            recorder.finish()
            buffer = self.context.buffer
            if buffer.point > buffer.document.line_beginning(buffer.point):
                buffer.goto(buffer.point - 1)
            return ModeResult(consumed=True, switch_to="normal", message="exit_insert")

        buffer = self.context.buffer
        recorder.append_key(key)
        if key == BACKSPACE:
            point = buffer.point
            if point == buffer.document.line_beginning(point):
                return ModeResult(consumed=True, status="boundary")
            buffer.replace_range(point - 1, point, "", label="insert_text")
            buffer.goto(point - 1)
            return ModeResult(consumed=True)
        text = "\n" if key == RETURN else key
        buffer.insert_text(text)
        buffer.goto(buffer.point + len(text))
        return ModeResult(consumed=True)

    def abort(self) -> ModeResult:
        return self.handle_key(ABORT)


__all__ = ["InsertMode"]
