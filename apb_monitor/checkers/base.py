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

"""Common base for per-tick protocol checkers.

Checkers
========

A checker is a pure function of the HistoryWindow: it reads the current (and
possibly previous) sample and returns the violations it finds. Checkers share
no mutable state and may be evaluated in any order within a tick.

How Checkers Work:
    The monitor calls evaluate() once per tick. evaluate() applies the reset
    precondition for every rule, then calls the subclass's check():
    1. Reset asserted on the current tick -> no violations, check() not called
    2. Otherwise check() inspects the window and returns violations

Checkers Provided:
    - ValidityChecker: signals sampled unknown
    - StabilityChecker: signals changing outside Idle/Setup, PSTRB on reads
    - HandshakeChecker: illegal PENABLE/PSEL deassertion
    - PhaseStateMachine: illegal phase-to-phase transitions
"""

from abc import ABC, abstractmethod

from ..config import MonitorConfig
from ..models.history import HistoryWindow
from ..models.violation import Violation, ViolationKind


class Checker(ABC):
    """Abstract base class for reset-gated protocol checkers.

    Subclasses implement check(); the reset gate lives here so that no rule
    special-cases reset on its own.
    """

    def __init__(self, config: MonitorConfig, name: str = "Checker"):
        """Initialize checker with monitor configuration.

        Args:
            config: Validated monitor configuration
            name: Checker name for log messages
        """
        self.config = config
        self.name = name

    def evaluate(self, window: HistoryWindow, tick: int) -> list[Violation]:
        """Return this tick's violations, or none while reset is asserted."""
        sample = window.current
        if sample is None or sample.reset_asserted:
            return []
        return self.check(window, tick)

    @abstractmethod
    def check(self, window: HistoryWindow, tick: int) -> list[Violation]:
        """Inspect a window whose current sample is outside reset."""
        ...

    @staticmethod
    def violation(
        tick: int,
        rule_name: str,
        kind: ViolationKind,
        message: str,
        signal: str | None = None,
    ) -> Violation:
        """Build a Violation record."""
        return Violation(
            tick=tick, rule_name=rule_name, message=message, kind=kind, signal=signal
        )
