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

"""Phase transition legality.

The machine has no mandatory start state: it begins checking from the first
tick whose predecessor was sampled outside reset with a defined phase.
"""

from ..config import MonitorConfig
from ..models.history import HistoryWindow
from ..models.phase import LEGAL_TRANSITIONS, is_legal_transition
from ..models.violation import Violation, ViolationKind
from .base import Checker


class PhaseStateMachine(Checker):
    """Flags phase(t-1) -> phase(t) pairs missing from the legal table."""

    def __init__(self, config: MonitorConfig) -> None:
        super().__init__(config, "PhaseStateMachine")

    def check(self, window: HistoryWindow, tick: int) -> list[Violation]:
        before, after = window.previous_phase, window.current_phase
        if not window.has_lookback or before is None or after is None:
            return []
        if is_legal_transition(before, after):
            return []

        legal = ", ".join(sorted(str(p) for p in LEGAL_TRANSITIONS[before]))
        return [
            self.violation(
                tick,
                "phase_transition",
                ViolationKind.ILLEGAL_PHASE_TRANSITION,
                f"Illegal phase transition {before} -> {after} "
                f"(legal after {before}: {legal})",
            )
        ]
