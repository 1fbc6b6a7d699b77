"""Key parsing: counts, commands and operator-pending motions."""

from .command import CommandParser, Invocation, ParseOutcome, read_command
from .count import (
    CountCommandExtractor,
    NeedInput,
    ParsedCommand,
    combine_counts,
    extract_count,
    split_count,
)
from .operator import OperatorPendingParser, OperatorPlan

__all__ = [
    "CommandParser",
    "CountCommandExtractor",
    "Invocation",
    "NeedInput",
    "OperatorPendingParser",
    "OperatorPlan",
    "ParseOutcome",
    "ParsedCommand",
    "combine_counts",
    "extract_count",
    "read_command",
    "split_count",
]
