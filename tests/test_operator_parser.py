from __future__ import annotations

import pytest

from vicmd.errors import UnknownCommand
from vicmd.keymaps.defaults import default_resolver
from vicmd.keymaps.models import CTRL_V
from vicmd.parsing import (
    CommandParser,
    Invocation,
    NeedInput,
    OperatorPendingParser,
    OperatorPlan,
    read_command,
)
from vicmd.ranges import RangeType
from vicmd.runtime.input import InputExhausted, VectorInput


def parse(keys: str):
    return OperatorPendingParser(default_resolver()).parse(keys)


def plan_for(keys: str) -> OperatorPlan:
    plan = parse(keys)
    assert isinstance(plan, OperatorPlan)
    return plan


def test_counts_multiply() -> None:
    plan = plan_for("2d2l")

    assert plan.count == 4
    assert plan.operator.id == "operator.delete"
    assert plan.motion is not None
    assert plan.motion.id == "motion.forward_char"
    assert plan.motion_index == 3
    assert plan.keys == tuple("2d2l")


def test_count_after_operator_only() -> None:
    assert plan_for("d404l").count == 404
    assert plan_for("d0").count is None
    assert plan_for("d0").motion.id == "motion.beginning_of_line"


@pytest.mark.parametrize(("keys", "count"), [("dd", None), ("3dd", 3), ("d3d", 3)])
def test_doubled_operator_is_linewise(keys: str, count: int | None) -> None:
    plan = plan_for(keys)

    assert plan.linewise
    assert plan.count == count


@pytest.mark.parametrize(
    ("keys", "force"),
    [("dvj", "toggle"), ("dVl", RangeType.LINE), (f"d{CTRL_V}j", RangeType.BLOCK)],
)
def test_forced_range_type(keys: str, force: object) -> None:
    assert plan_for(keys).force == force


def test_motion_argument() -> None:
    plan = plan_for("dfx")
    assert plan.motion.id == "motion.find_char"
    assert plan.argument == "x"

    waiting = parse("df")
    assert isinstance(waiting, NeedInput)
    assert waiting.stage == "argument"


@pytest.mark.parametrize("keys", ["d", "2d", "d3", "dg", "dv"])
def test_incomplete_operator_waits_for_motion(keys: str) -> None:
    waiting = parse(keys)

    assert isinstance(waiting, NeedInput)
    assert waiting.operator is not None
    assert waiting.operator.id == "operator.delete"


@pytest.mark.parametrize("keys", ["dx", "dq", "dgx"])
def test_non_motion_after_operator_is_unknown(keys: str) -> None:
    with pytest.raises(UnknownCommand):
        parse(keys)


def test_plan_keeps_remainder() -> None:
    plan = plan_for("dwx")

    assert plan.keys == tuple("dw")
    assert plan.remainder == ("x",)


def test_command_parser_reads_argument() -> None:
    parser = CommandParser(default_resolver())

    invocation = parser.parse("3rX")

    assert isinstance(invocation, Invocation)
    assert invocation.action_id == "edit.replace_char"
    assert invocation.count == 3
    assert invocation.argument == "X"


def test_read_command_pulls_until_complete() -> None:
    parser = CommandParser(default_resolver())
    source = VectorInput("2d2lx")

    invocation = read_command(parser, source)

    assert invocation.plan is not None
    assert invocation.count == 4
    assert len(source) == 1


def test_read_command_multi_key_command() -> None:
    parser = CommandParser(default_resolver())

    invocation = read_command(parser, VectorInput("ZQ"))

    assert invocation.action_id == "edit.discard_buffer"


def test_read_command_exhausted_mid_command() -> None:
    parser = CommandParser(default_resolver())

    with pytest.raises(InputExhausted):
        read_command(parser, VectorInput("2d"))
