from __future__ import annotations

import pytest

from vicmd.errors import IncompleteCount, UnknownCommand
from vicmd.keymaps.defaults import default_resolver
from vicmd.parsing import CountCommandExtractor, NeedInput, extract_count, split_count
from vicmd.runtime.options import EngineOptions


def summary(keys: str) -> tuple:
    parsed = extract_count(keys)
    return parsed.count, parsed.command.id, parsed.consumed, parsed.remainder


def test_extract_count_splits_count_and_command() -> None:
    assert summary("420x") == (420, "edit.delete_char", "x", None)
    assert summary("202x") == (202, "edit.delete_char", "x", None)


def test_zero_is_a_motion_not_a_count() -> None:
    assert summary("0") == (None, "motion.beginning_of_line", "0", None)
    assert summary("020") == (None, "motion.beginning_of_line", "0", "20")


def test_extract_count_multi_key_command_and_remainder() -> None:
    assert summary("3gg") == (3, "motion.goto_first_line", "gg", None)
    assert summary("2dw") == (2, "operator.delete", "d", "w")


def test_count_without_command_is_incomplete() -> None:
    with pytest.raises(IncompleteCount):
        extract_count("1230")


@pytest.mark.parametrize("keys", ["§", "g", "gq"])
def test_unbound_or_partial_command_is_unknown(keys: str) -> None:
    with pytest.raises(UnknownCommand):
        extract_count(keys)


def test_split_count() -> None:
    assert split_count("12x") == (12, 2)
    assert split_count("0x") == (None, 0)
    assert split_count("d3w", 1) == (3, 2)


def test_extractor_suspends_for_more_keys() -> None:
    extractor = CountCommandExtractor(default_resolver())

    waiting = extractor.feed("12")
    assert isinstance(waiting, NeedInput)
    assert waiting.stage == "count"
    assert waiting.count == 12

    partial = extractor.feed("12Z")
    assert isinstance(partial, NeedInput)
    assert partial.stage == "command"
    assert partial.expected == ("Q",)


def test_extractor_clamps_count() -> None:
    extractor = CountCommandExtractor(
        default_resolver(), options=EngineOptions(max_count=10)
    )

    parsed = extractor.feed("50x")

    assert parsed.count == 10
