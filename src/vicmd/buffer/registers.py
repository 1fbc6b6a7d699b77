"""Register storage for yanked and deleted text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from vicmd.ranges import RangeType

UNNAMED = '"'
YANK = "0"
SMALL_DELETE = "-"


@dataclass(frozen=True, slots=True)
class RegisterValue:
    text: str
    type: RangeType = RangeType.EXCLUSIVE

    @property
    def linewise(self) -> bool:
        return self.type is RangeType.LINE


class RegisterBank:
    """Tracks the unnamed, yank, numbered and named registers.

    Yanks land in ``"0``. Deletes spanning lines shift ``"1``..``"9``; short
    deletes go to ``"-``. Every write also updates the unnamed register.
    """

    def __init__(self) -> None:
        self._registers: Dict[str, RegisterValue] = {UNNAMED: RegisterValue("")}

    def get(self, name: str = UNNAMED) -> RegisterValue:
        return self._registers.get(name, RegisterValue(""))

    def set(self, name: str, value: RegisterValue) -> None:
        if name.isupper():
            existing = self.get(name.lower())
            value = RegisterValue(existing.text + value.text, existing.type)
            name = name.lower()
        self._registers[name] = value
        self._registers[UNNAMED] = value

    def yank(self, text: str, range_type: RangeType, *, name: str = UNNAMED) -> None:
        value = RegisterValue(text, range_type)
        if name == UNNAMED:
            self._registers[YANK] = value
            self._registers[UNNAMED] = value
        else:
            self.set(name, value)

    def delete(self, text: str, range_type: RangeType, *, name: str = UNNAMED) -> None:
        value = RegisterValue(text, range_type)
        if name != UNNAMED:
            self.set(name, value)
            return
        if "\n" in text or range_type is RangeType.LINE:
            for index in range(9, 1, -1):
                previous = self._registers.get(str(index - 1))
                if previous is not None:
                    self._registers[str(index)] = previous
            self._registers["1"] = value
        else:
            self._registers[SMALL_DELETE] = value
        self._registers[UNNAMED] = value


__all__ = ["RegisterBank", "RegisterValue", "SMALL_DELETE", "UNNAMED", "YANK"]
