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

"""Violation reporters.

The monitor hands every violation to each of its reporters as soon as it is
detected. Reporters decide how to render or store them.

Usage:
    reporter = CollectingReporter()
    monitor = ApbProtocolMonitor(reporters=[LoggingReporter(), reporter])
    monitor.run(samples)
    reporter.check_complete()  # AssertionError if anything was reported
"""

import logging
from collections import Counter
from typing import Protocol

from .models.violation import Violation, ViolationKind

log = logging.getLogger(__name__)


class ViolationReporter(Protocol):
    """Anything that accepts violation events."""

    def report(self, violation: Violation) -> None:
        """Receive one violation."""
        ...


class LoggingReporter:
    """Logs each violation at ERROR level."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or log

    def report(self, violation: Violation) -> None:
        self.logger.error(str(violation))


class CollectingReporter:
    """Keeps every violation for inspection at the end of a run.

    Usage:
        reporter = CollectingReporter()
        ...
        assert reporter.count("psel_fall") == 1
        reporter.check_complete()
    """

    def __init__(self) -> None:
        self.violations: list[Violation] = []
        self.counts: Counter[str] = Counter()

    def report(self, violation: Violation) -> None:
        self.violations.append(violation)
        self.counts[violation.rule_name] += 1

    def count(self, rule_name: str | None = None) -> int:
        """Return the number of violations of a rule (or of all rules)."""
        if rule_name is None:
            return len(self.violations)
        return self.counts[rule_name]

    def of_kind(self, kind: ViolationKind) -> list[Violation]:
        """Return the violations of one category, in report order."""
        return [v for v in self.violations if v.kind is kind]

    def summary(self) -> str:
        """Return a per-rule count table."""
        if not self.violations:
            return "No APB protocol violations"
        lines = [f"{len(self.violations)} APB protocol violations:"]
        for rule_name, count in sorted(self.counts.items()):
            lines.append(f"  {rule_name:24} {count}")
        return "\n".join(lines)

    def clear(self) -> None:
        self.violations.clear()
        self.counts.clear()

    def check_complete(self) -> None:
        """Check that no violations were reported.

        Raises AssertionError listing every violation otherwise.
        """
        if self.violations:
            raise AssertionError(
                f"APB monitor: {len(self.violations)} violations:\n"
                + "\n".join(str(v) for v in self.violations)
            )
