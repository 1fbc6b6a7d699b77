"""Recording of repeatable commands into a normalized repeat script."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

from vicmd.runtime import telemetry

from .tokens import RawItem, RepeatInfo, SymbolicToken, normalize, render


@dataclass(slots=True)
class RecordingSession:
    """Append-only log for the command currently being executed."""

    items: List[RawItem] = field(default_factory=list)
    active: bool = True

    def append(self, item: RawItem) -> None:
        if not self.active:
            raise RuntimeError("recording session already finalized")
        self.items.append(item)

    def snapshot(self) -> RepeatInfo:
        return normalize(self.items)


class RepeatRecorder:
    """Owns the last repeat-info and at most one in-progress session.

    A session starts only once a command is known to be repeatable, so a
    motion or a failing parse never disturbs ``last``. While the executor
    replays ``last`` every recording call is ignored.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._last: RepeatInfo = ()
        self._session: Optional[RecordingSession] = None
        self._replay_depth = 0
        self._logger_name = logger_name

    @property
    def last(self) -> RepeatInfo:
        return self._last

    @property
    def recording(self) -> bool:
        return self._session is not None and self._session.active

    @property
    def replaying(self) -> bool:
        return self._replay_depth > 0

    def begin(self, items: Iterable[RawItem] = ()) -> Optional[RecordingSession]:
        if self.replaying:
            return None
        if self._session is not None:
            unfinished = render(self._session.snapshot())
            self._log("recorder.discard_unfinished", keys=unfinished)
        self._session = RecordingSession(items=list(items))
        return self._session

    def append_key(self, key: str) -> None:
        if self.replaying or self._session is None:
            return
        self._session.append(key)

    def append_symbolic(self, token: SymbolicToken) -> None:
        if self.replaying or self._session is None:
            return
        self._session.append(token)

    def finish(self) -> Optional[RepeatInfo]:
        """Finalize the session and make its script the new ``last``."""

        if self.replaying or self._session is None:
            return None
        session, self._session = self._session, None
        session.active = False
        info = session.snapshot()
        if info:
            self._last = info
            self._log("recorder.finish", keys=render(info), tokens=len(info))
        return info

    def cancel(self) -> None:
        if self._session is None:
            return
        self._session.active = False
        self._session = None
        self._log("recorder.cancel")

    def replace_last(self, info: RepeatInfo) -> None:
        self._last = normalize(info)

    @contextmanager
    def replay(self) -> Iterator[RepeatInfo]:
        """Suppress recording while the yielded snapshot of ``last`` replays."""

        snapshot = self._last
        self._replay_depth += 1
        try:
            yield snapshot
        finally:
            self._replay_depth -= 1

    def _log(self, event: str, **data: object) -> None:
        telemetry.record_event(
            event, level="debug", data=dict(data), logger_name=self._logger_name
        )


__all__ = ["RecordingSession", "RepeatRecorder"]
