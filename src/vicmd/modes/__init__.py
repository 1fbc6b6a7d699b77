"""Editor modes and the values they exchange with actions."""

from .base_mode import (
    ActionCall,
    Mode,
    ModeBus,
    ModeContext,
    ModeResult,
    MotionResult,
)
from .normal_mode import NormalMode
from .insert_mode import InsertMode

__all__ = [
    "ActionCall",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "MotionResult",
    "NormalMode",
    "InsertMode",
]
