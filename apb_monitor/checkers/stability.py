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

"""Signal stability checks.

Address and control signals are driven in SETUP and must hold their value
until the transfer completes. A change is therefore legal only on a tick
whose own phase is IDLE or SETUP (a transfer boundary):

    tick     t-1        t           PADDR(t) != PADDR(t-1) legal?
            IDLE   ->  SETUP        yes (new transfer)
            SETUP  ->  ACCESS_WAIT  no
            ACCESS_LAST -> SETUP    yes (back-to-back transfer)

Rules:
    - Generic stability for the configured signals (PADDR, PPROT, PSTRB,
      PSLVERR by default)
    - PWDATA stability, enforced only while the current transfer is a write
    - PSTRB must be exactly zero during a read (a per-tick check, no
      lookback); an unknown PSTRB is not zero and is flagged too

Comparisons use TriState equality: Unknown -> Known(0) is a change, and two
Unknown samples are not.
"""

from ..config import MonitorConfig, display_name
from ..models.bus_sample import BusSample
from ..models.history import HistoryWindow
from ..models.phase import Phase
from ..models.tristate import Known, is_false, is_true
from ..models.violation import Violation, ViolationKind
from .base import Checker


class StabilityChecker(Checker):
    """Flags signals that change outside a transfer boundary."""

    def __init__(self, config: MonitorConfig) -> None:
        super().__init__(config, "StabilityChecker")
        self.stable_signals = config.stable_signals

    def check(self, window: HistoryWindow, tick: int) -> list[Violation]:
        current, previous = window.current, window.previous
        if current is None:
            return []
        violations = self._check_strobe_on_read(current, tick)
        if previous is not None:
            phase = window.current_phase
            violations.extend(self._check_generic(previous, current, phase, tick))
            violations.extend(self._check_write_data(previous, current, phase, tick))
        return violations

    @staticmethod
    def _change_is_legal(phase: Phase | None) -> bool:
        # Undefined phase: the classifier inputs are already reported as unknown
        return phase is None or phase.is_transfer_boundary

    def _check_generic(
        self, previous: BusSample, current: BusSample, phase: Phase | None, tick: int
    ) -> list[Violation]:
        """Check every configured signal against the previous tick."""
        if self._change_is_legal(phase):
            return []

        violations = []
        for signal in self.stable_signals:
            before = previous.signal(signal)
            after = current.signal(signal)
            if before != after:
                violations.append(
                    self.violation(
                        tick,
                        f"{signal}_stable",
                        ViolationKind.STABILITY,
                        f"{display_name(signal)} changed {before} -> {after} "
                        f"during {phase}",
                        signal,
                    )
                )
        return violations

    def _check_write_data(
        self, previous: BusSample, current: BusSample, phase: Phase | None, tick: int
    ) -> list[Violation]:
        """PWDATA must hold during the access phase of a write transfer."""
        if not is_true(current.write) or self._change_is_legal(phase):
            return []

        before, after = previous.wdata, current.wdata
        if before == after:
            return []
        return [
            self.violation(
                tick,
                "pwdata_stable",
                ViolationKind.WRITE_DATA_STABILITY,
                f"PWDATA changed {before} -> {after} during write {phase}",
                "pwdata",
            )
        ]

    def _check_strobe_on_read(self, sample: BusSample, tick: int) -> list[Violation]:
        """PSTRB must be zero whenever PSEL is high for a read."""
        if not (is_true(sample.select) and is_false(sample.write)):
            return []
        strobe = sample.strobe
        if strobe != Known(0):
            return [
                self.violation(
                    tick,
                    "pstrb_zero_on_read",
                    ViolationKind.STROBE_NONZERO_ON_READ,
                    f"PSTRB is {strobe} during a read transfer (must be 0)",
                    "pstrb",
                )
            ]
        return []
