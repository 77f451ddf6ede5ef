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

"""Tick-synchronous APB protocol monitor.

Protocol Monitor
================

ApbProtocolMonitor is the passive core: it consumes one BusSample per clock
tick, in clock order, and reports every protocol violation it exposes. It has
no notion of time beyond the tick counter and never drives the bus.

How a Tick Is Processed:
    1. Classify the sample's phase (None if PSEL/PENABLE/PREADY are unknown)
    2. Push sample and phase into the HistoryWindow
    3. Evaluate every checker against the window (reset-gated in the base class)
    4. Drop phase-transition violations already explained by an illegal
       PSEL/PENABLE fall on the same tick (unless configured otherwise)
    5. Deliver the violations to every reporter, then advance the tick counter

Violations are data: a tick with violations is processed exactly like a
clean one, and later ticks are unaffected.

Usage:
    reporter = CollectingReporter()
    monitor = ApbProtocolMonitor(MonitorConfig(data_width=32), [reporter])
    for sample in samples:
        monitor.step(sample)
    reporter.check_complete()
"""

import logging
from collections.abc import Iterable, Sequence

from ..checkers import (
    Checker,
    HandshakeChecker,
    PhaseStateMachine,
    StabilityChecker,
    ValidityChecker,
)
from ..config import MonitorConfig
from ..models.bus_sample import BusSample
from ..models.history import HistoryWindow
from ..models.phase import PhaseClassifier
from ..models.violation import Violation, ViolationKind
from ..reporters import ViolationReporter

log = logging.getLogger(__name__)

# Handshake violations that already explain an illegal phase transition
_TRANSITION_EXPLAINED_BY = frozenset(
    {ViolationKind.ILLEGAL_SELECT_FALL, ViolationKind.ILLEGAL_ENABLE_FALL}
)


class ApbProtocolMonitor:
    """Passive APB protocol-compliance monitor."""

    def __init__(
        self,
        config: MonitorConfig | None = None,
        reporters: Sequence[ViolationReporter] = (),
    ) -> None:
        """Initialize monitor.

        Args:
            config: Bus widths and rule options (defaults: 32-bit address and
                data). MonitorConfig validates itself on construction, so an
                invalid configuration never reaches the first tick.
            reporters: Collaborators that receive every violation
        """
        self.config = config or MonitorConfig()
        self.reporters: list[ViolationReporter] = list(reporters)
        self.classifier = PhaseClassifier()
        self.checkers: list[Checker] = [
            ValidityChecker(self.config),
            StabilityChecker(self.config),
            HandshakeChecker(self.config),
            PhaseStateMachine(self.config),
        ]
        self._history = HistoryWindow()
        self._tick = 0
        self._violation_count = 0
        self._in_reset = False

    @property
    def tick(self) -> int:
        """Index that the next sample will be assigned."""
        return self._tick

    @property
    def history(self) -> HistoryWindow:
        """The monitor's lookback window (read-only use)."""
        return self._history

    @property
    def violation_count(self) -> int:
        """Total number of violations reported so far."""
        return self._violation_count

    def add_reporter(self, reporter: ViolationReporter) -> None:
        self.reporters.append(reporter)

    def step(self, sample: BusSample) -> list[Violation]:
        """Process one clock tick and return the violations it exposed."""
        tick = self._tick
        self._track_reset(sample, tick)

        phase = self.classifier.classify(sample)
        self._history.push(sample, phase)
        log.debug("tick %d phase=%s %s", tick, phase, sample.describe())

        violations: list[Violation] = []
        for checker in self.checkers:
            violations.extend(checker.evaluate(self._history, tick))
        violations = self._drop_redundant_transitions(violations)

        for violation in violations:
            for reporter in self.reporters:
                reporter.report(violation)
        self._violation_count += len(violations)
        self._tick += 1
        return violations

    def run(self, samples: Iterable[BusSample]) -> list[Violation]:
        """Process every sample in order and return all violations."""
        violations: list[Violation] = []
        for sample in samples:
            violations.extend(self.step(sample))
        return violations

    def reset(self) -> None:
        """Forget all history and restart the tick counter."""
        self._history.clear()
        self._tick = 0
        self._violation_count = 0
        self._in_reset = False

    def _track_reset(self, sample: BusSample, tick: int) -> None:
        if sample.reset_asserted and not self._in_reset:
            log.info("tick %d: reset asserted, checks suspended", tick)
        elif self._in_reset and not sample.reset_asserted:
            log.info("tick %d: reset released, checks resumed", tick)
        self._in_reset = sample.reset_asserted

    def _drop_redundant_transitions(
        self, violations: list[Violation]
    ) -> list[Violation]:
        if self.config.report_redundant_transitions:
            return violations
        if not any(v.kind in _TRANSITION_EXPLAINED_BY for v in violations):
            return violations
        return [
            v
            for v in violations
            if v.kind is not ViolationKind.ILLEGAL_PHASE_TRANSITION
        ]
