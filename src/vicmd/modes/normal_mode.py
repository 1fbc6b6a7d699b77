"""Normal mode: parse counts, operators and motions, then run them."""

from __future__ import annotations

from typing import List, Optional, Tuple

from vicmd.errors import VicmdError
from vicmd.keymaps import ActionRef
from vicmd.keymaps.models import ABORT, ESCAPE
from vicmd.parsing import CommandParser, Invocation, NeedInput, OperatorPlan
from vicmd.ranges import Range, RangeType, expand
from vicmd.repeat.tokens import SymbolicToken
from vicmd.runtime import telemetry
from vicmd.runtime.input import KeyItem

from .base_mode import ActionCall, Mode, ModeContext, ModeResult, MotionResult
from .keymap_helpers import lookup_action, require_keymap_resolver

# Results after which nothing changed, so nothing is worth repeating.
_UNCHANGED = frozenset({"boundary", "noop", "empty"})


def _forced(kind: RangeType, force: object) -> RangeType:
    if force is None:
        return kind
    if force == "toggle":
        if kind is RangeType.EXCLUSIVE:
            return RangeType.INCLUSIVE
        return RangeType.EXCLUSIVE
    return RangeType(force)


def _motion_result(action_id: str, motion: object) -> MotionResult:
    if not isinstance(motion, MotionResult):
        raise TypeError(
            f"Motion '{action_id}' returned {type(motion).__name__}, not MotionResult"
        )
    return motion


class NormalMode(Mode):
    """Collects keys until they form a command, then executes it.

    Keys accumulate in ``pending`` while the parser reports a valid prefix.
    ``ESC`` and ``^G`` abort a partial command. Repeatable commands are
    handed to the recorder once they have run; commands that switch to
    insert mode leave the session open for the insert mode to finish.
    """

    name = "normal"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("vicmd.modes.normal")
        self._resolver = require_keymap_resolver(context)
        self.parser = CommandParser(
            self._resolver, mode=self.name, options=context.options
        )
        self._pending: List[KeyItem] = []

    @property
    def pending(self) -> Tuple[KeyItem, ...]:
        return tuple(self._pending)

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        self._pending.clear()

    def handle_key(self, key: str) -> ModeResult:
        if key in (ESCAPE, ABORT):
            return self.abort()
        return self._feed(key)

    def handle_symbolic(self, token: SymbolicToken) -> ModeResult:
        return self._feed(token)

    def abort(self) -> ModeResult:
        dropped = len(self._pending)
        self._pending.clear()
        self.context.recorder.cancel()
        if dropped:
            telemetry.record_event(
                "normal.abort", level="debug", data={"dropped": dropped}
            )
        return ModeResult(consumed=True, status="abort")

    def _feed(self, item: KeyItem) -> ModeResult:
        self._pending.append(item)
        try:
            outcome = self.parser.parse(self._pending)
        except VicmdError:
            self._pending.clear()
            self.context.recorder.cancel()
            raise
        if isinstance(outcome, NeedInput):
            return ModeResult(consumed=True, status="pending", message=outcome.stage)
        self._pending = list(outcome.remainder)
        return self.execute(outcome)

    def execute(self, invocation: Invocation) -> ModeResult:
        """Run a parsed command and record it if it is repeatable."""

        with telemetry.span(
            "normal::execute",
            component="modes",
            metadata={"action": invocation.action_id, "count": invocation.count},
        ) as handle:
            try:
                result, items = self._dispatch(invocation)
            except VicmdError as exc:
                handle.fail(type(exc).__name__)
                self.context.recorder.cancel()
                raise
            handle.add_metadata("status", result.status)

        action = invocation.action
        if (
            action is not None
            and action.repeatable
            and (result.switch_to == "insert" or result.status not in _UNCHANGED)
        ):
            recorder = self.context.recorder
            recorder.begin(items)
            if result.switch_to != "insert":
                recorder.finish()
        if result.switch_to is None and not self.context.buffer.state.discarded:
            self._settle_point()
        return result

    def _dispatch(self, invocation: Invocation) -> Tuple[ModeResult, List[KeyItem]]:
        items: List[KeyItem] = list(invocation.keys)
        if invocation.symbolic is not None:
            return self._run_symbolic(invocation.symbolic, invocation.count), items

        action = invocation.action
        if action is None:
            raise TypeError("Invocation carries neither an action nor a token")
        self.context.check_repeat_safe(action)
        call = ActionCall(count=invocation.count, argument=invocation.argument)
        if action.kind == "motion":
            return self._run_motion(action, call), items
        if action.kind == "operator":
            plan = invocation.plan
            if plan is None:
                raise TypeError(f"Operator '{action.id}' has no operator plan")
            result, token = self._run_operator(plan)
            if token is not None:
                items = items[: plan.motion_index] + [token]
            return result, items

        outcome = action.handler(self.context, call)
        if not isinstance(outcome, ModeResult):
            outcome = ModeResult(consumed=True)
        return outcome, items

    def _run_symbolic(self, token: SymbolicToken, count: Optional[int]) -> ModeResult:
        self.context.check_repeat_safe(token)
        action = lookup_action(self.context, token.action_id)
        self.context.check_repeat_safe(action)
        call = ActionCall(count=count).with_state(token.state)
        if action.kind == "motion":
            return self._run_motion(action, call)
        outcome = token.invoke(self.context, call)
        if not isinstance(outcome, ModeResult):
            outcome = ModeResult(consumed=True)
        return outcome

    def _run_motion(self, action: ActionRef, call: ActionCall) -> ModeResult:
        buffer = self.context.buffer
        motion = _motion_result(action.id, action.handler(self.context, call))
        buffer.goto(motion.target)
        if not action.metadata.get("keeps_goal"):
            buffer.state.goal_column = None
        status = "boundary" if motion.failed else "ok"
        return ModeResult(consumed=True, status=status, overshoot=motion.overshoot)

    def _run_operator(
        self, plan: OperatorPlan
    ) -> Tuple[ModeResult, Optional[SymbolicToken]]:
        """Resolve the plan's range and apply the operator to it.

        Returns the operator's result and, for an interactive motion, the
        symbolic token that should be recorded in place of its keys.
        """

        context = self.context
        buffer = context.buffer
        operator = plan.operator
        origin = buffer.point
        token: Optional[SymbolicToken] = None
        overshoot = 0

        if plan.linewise:
            document = buffer.document
            first = document.line_number(origin)
            wanted = first + (plan.count or 1) - 1
            last = min(wanted, document.line_count - 1)
            overshoot = wanted - last
            span = expand(document, origin, document.line_start(last), RangeType.LINE)
        else:
            if plan.symbolic is not None:
                motion_ref = lookup_action(context, plan.symbolic.action_id)
            elif plan.motion is not None:
                motion_ref = plan.motion
            else:
                raise TypeError(f"Operator '{operator.id}' has no motion to apply")
            context.check_repeat_safe(motion_ref)
            call = ActionCall(
                count=plan.count, argument=plan.argument, operator=operator
            )
            if plan.symbolic is not None:
                returned = plan.symbolic.invoke(context, call)
            else:
                returned = motion_ref.handler(context, call)
            buffer.goto(origin)
            buffer.state.goal_column = None
            motion = _motion_result(motion_ref.id, returned)
            if motion.failed and motion.target == origin:
                return (
                    ModeResult(
                        consumed=True, status="boundary", overshoot=motion.overshoot
                    ),
                    None,
                )
            if plan.motion is not None and plan.motion.interactive:
                token = SymbolicToken(
                    motion_ref.id,
                    motion_ref.handler,
                    motion.state,
                    kind="motion",
                    destroys_context=motion_ref.destroys_context,
                )
            kind = motion.range_type or motion_ref.range_type or RangeType.EXCLUSIVE
            begin = origin if motion.begin is None else motion.begin
            kind = _forced(kind, plan.force)
            span = expand(buffer.document, begin, motion.target, kind)
            overshoot = motion.overshoot

        span = self._clip(span)
        call = ActionCall(count=plan.count, operator=operator)
        outcome = operator.handler(context, span, call)
        if not isinstance(outcome, ModeResult):
            outcome = ModeResult(consumed=True)
        if overshoot and outcome.overshoot == 0:
            outcome.overshoot = overshoot
        return outcome, token

    def _clip(self, span: Range) -> Range:
        length = len(self.context.buffer.document)
        return Range(min(span.begin, length), min(span.end, length), span.type)

    def _settle_point(self) -> None:
        """Keep point on a character: never past the last one of its line."""

        buffer = self.context.buffer
        document = buffer.document
        point = buffer.point
        if point > document.line_beginning(point) and point == document.line_end(point):
            buffer.goto(point - 1)


__all__ = ["NormalMode"]
