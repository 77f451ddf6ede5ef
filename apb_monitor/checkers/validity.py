#    Copyright 2026 Two Sigma Open Source, LLC
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.

"""Signal validity checks (no X/Z outside reset)."""

from ..config import MonitorConfig, display_name
from ..models.history import HistoryWindow
from ..models.tristate import Unknown
from ..models.violation import Violation, ViolationKind
from .base import Checker


class ValidityChecker(Checker):
    """Flags every monitored signal sampled as unknown.

    One violation per unknown signal per tick; a signal stuck unknown for N
    ticks produces N violations.
    """

    def __init__(self, config: MonitorConfig) -> None:
        super().__init__(config, "ValidityChecker")

    def check(self, window: HistoryWindow, tick: int) -> list[Violation]:
        if window.current is None:
            return []
        violations = []
        for signal, value in window.current.signals():
            if isinstance(value, Unknown):
                violations.append(
                    self.violation(
                        tick,
                        f"{signal}_never_unknown",
                        ViolationKind.UNKNOWN_SIGNAL,
                        f"{display_name(signal)} is unknown (X/Z) outside reset",
                        signal,
                    )
                )
        return violations
