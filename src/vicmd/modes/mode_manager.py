"""Mode manager coordinating normal and insert modes and the repeat executor."""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Type

from vicmd.buffer import Buffer
from vicmd.keymaps import KeymapRegistry, KeymapResolver
from vicmd.keymaps.defaults import load_default_keymaps
from vicmd.repeat.executor import Classifier, RepeatExecutor
from vicmd.repeat.recorder import RepeatRecorder
from vicmd.repeat.tokens import SymbolicToken
from vicmd.runtime import telemetry
from vicmd.runtime.input import InputExhausted, InputSource, KeyItem
from vicmd.runtime.options import EngineOptions

from .base_mode import Mode, ModeBus, ModeContext, ModeResult
from .insert_mode import InsertMode
from .normal_mode import NormalMode


class ModeManager:
    """Owns the active mode, handles transitions and dispatches key items."""

    def __init__(
        self,
        context: ModeContext,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
        register_default_modes: bool = True,
        classifier: Optional[Classifier] = None,
    ) -> None:
        self.context = context
        self._modes: Dict[str, Mode] = {}
        self._active: Optional[str] = None
        self.logger = telemetry.get_logger("vicmd.modes")
        if keymap_resolver is not None:
            keymap_registry = keymap_resolver.registry
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="vicmd.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="vicmd.keymaps"
        )
        self.context.extras.setdefault("keymap_registry", self.keymap_registry)
        self.context.extras.setdefault("keymap_resolver", self.keymap_resolver)
        self.context.extras.setdefault("mode_manager", self)
        self.executor = RepeatExecutor(
            self,
            context.recorder,
            classifier=classifier,
            options=context.options,
            logger_name="vicmd.repeat",
        )
        context.executor = self.executor
        if register_default_modes:
            self.register_mode(NormalMode)
            self.register_mode(InsertMode)

    @classmethod
    def from_text(
        cls,
        text: str = "",
        *,
        point: int = 0,
        options: Optional[EngineOptions] = None,
        prompt=None,
        **kwargs,
    ) -> "ModeManager":
        """Build a manager over a fresh buffer holding ``text``."""

        buffer = Buffer.from_text(text, point=point)
        context = ModeContext(
            buffer=buffer,
            registers=buffer.registers,
            bus=ModeBus(),
            recorder=RepeatRecorder(logger_name="vicmd.repeat"),
            options=options or EngineOptions.from_env(),
        )
        if prompt is not None:
            context.extras["prompt"] = prompt
        return cls(context, **kwargs)

    @property
    def buffer(self) -> Buffer:
        return self.context.buffer

    @property
    def recorder(self) -> RepeatRecorder:
        return self.context.recorder

    @property
    def active_mode(self) -> Optional[Mode]:
        if self._active is None:
            return None
        return self._modes.get(self._active)

    @property
    def pending(self) -> bool:
        """Whether the active mode holds a partially typed command."""

        return bool(getattr(self.active_mode, "pending", ()))

    def register_mode(
        self,
        mode_cls: Type[Mode],
        /,
        *mode_args: object,
        **mode_kwargs: object,
    ) -> Mode:
        mode = mode_cls(self.context, *mode_args, **mode_kwargs)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        if self._active is None:
            self._active = mode.name
            mode.on_enter(None)
        return mode

    def switch_mode(self, name: str) -> None:
        if name not in self._modes:
            raise KeyError(f"Unknown mode '{name}'")
        previous = self.active_mode
        if previous and previous.name == name:
            return
        if previous:
            previous.on_exit(name)
        self._active = name
        self._modes[name].on_enter(previous.name if previous else None)
        self.context.bus.emit("mode.switch", name)
        telemetry.record_event("mode.switch", data={"mode": name})

    def handle_key(self, key: str) -> ModeResult:
        mode = self._require_mode()
        with telemetry.span(
            name=f"mode::{mode.name}",
            component=True,
            metadata={"key": key, "mode": mode.name},
        ):
            result = mode.handle_key(key)
        return self._after_mode_result(result)

    def handle_symbolic(self, token: SymbolicToken) -> ModeResult:
        mode = self._require_mode()
        with telemetry.span(
            name=f"mode::{mode.name}",
            component=True,
            metadata={"symbolic": token.action_id, "mode": mode.name},
        ):
            result = mode.handle_symbolic(token)
        return self._after_mode_result(result)

    def dispatch(self, item: KeyItem) -> ModeResult:
        """Route a key code or a symbolic token to the active mode."""

        if isinstance(item, SymbolicToken):
            return self.handle_symbolic(item)
        return self.handle_key(item)

    def feed(self, keys: Iterable[KeyItem]) -> ModeResult:
        """Dispatch every item of ``keys``; strings are split into key codes."""

        result = ModeResult(consumed=False, status="noop")
        for item in keys:
            if isinstance(item, str) and len(item) != 1:
                for key in item:
                    result = self.dispatch(key)
            else:
                result = self.dispatch(item)
        return result

    def run(self, source: InputSource) -> ModeResult:
        """Pull items from ``source`` until it is exhausted."""

        result = ModeResult(consumed=False, status="noop")
        while True:
            try:
                item = source.next()
            except InputExhausted:
                return result
            result = self.dispatch(item)

    def abort(self) -> ModeResult:
        return self._after_mode_result(self._require_mode().abort())

    def _require_mode(self) -> Mode:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        return mode

    def _after_mode_result(self, result: ModeResult) -> ModeResult:
        if result.switch_to:
            self.switch_mode(result.switch_to)
        return result


__all__ = ["ModeManager"]
