"""Runtime services: telemetry, options and key sources."""

from .input import InputExhausted, InputSource, KeyItem, VectorInput
from .options import EngineOptions

__all__ = [
    "EngineOptions",
    "InputExhausted",
    "InputSource",
    "KeyItem",
    "VectorInput",
]
