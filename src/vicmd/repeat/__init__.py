"""Repeat scripts: tokens, the recorder and (in ``executor``) replay."""

from .recorder import RecordingSession, RepeatRecorder
from .tokens import (
    LiteralToken,
    RawItem,
    RepeatInfo,
    RepeatToken,
    SymbolicToken,
    flatten,
    normalize,
    render,
)

__all__ = [
    "LiteralToken",
    "RawItem",
    "RecordingSession",
    "RepeatInfo",
    "RepeatRecorder",
    "RepeatToken",
    "SymbolicToken",
    "flatten",
    "normalize",
    "render",
]
