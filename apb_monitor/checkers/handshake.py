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

"""PSEL / PENABLE deassertion checks.

PSEL and PENABLE define the phases, so their own stability cannot be stated
in terms of phases. These rules read raw signal history instead:

    PENABLE fall (1 -> 0): legal if PSEL is now a known 0 or the previous
        tick completed an access (PENABLE and PREADY both high).
    PSEL fall (1 or X -> 0): legal only if the previous tick completed an
        access. An unknown PSEL going low is treated as a fall.

An unknown PENABLE going low is not a fall; the unknown value is reported by
the validity check on the tick it was sampled.
"""

from ..config import MonitorConfig
from ..models.bus_sample import BusSample
from ..models.history import HistoryWindow
from ..models.tristate import Unknown, is_false, is_true
from ..models.violation import Violation, ViolationKind
from .base import Checker


def access_completed(sample: BusSample) -> bool:
    """True if the sample is the last tick of an access (PENABLE & PREADY)."""
    return is_true(sample.enable) and is_true(sample.ready)


class HandshakeChecker(Checker):
    """Flags PENABLE or PSEL dropping before the access completed."""

    def __init__(self, config: MonitorConfig) -> None:
        super().__init__(config, "HandshakeChecker")

    def check(self, window: HistoryWindow, tick: int) -> list[Violation]:
        previous, current = window.previous, window.current
        if previous is None or current is None:
            return []
        completed = access_completed(previous)
        violations = []

        enable_fell = is_true(previous.enable) and is_false(current.enable)
        if enable_fell and not (is_false(current.select) or completed):
            violations.append(
                self.violation(
                    tick,
                    "penable_fall",
                    ViolationKind.ILLEGAL_ENABLE_FALL,
                    "PENABLE deasserted before PREADY completed the access "
                    f"(previous PREADY={previous.ready}, PSEL={current.select})",
                    "penable",
                )
            )

        select_was_high = is_true(previous.select) or isinstance(
            previous.select, Unknown
        )
        select_fell = select_was_high and is_false(current.select)
        if select_fell and not completed:
            violations.append(
                self.violation(
                    tick,
                    "psel_fall",
                    ViolationKind.ILLEGAL_SELECT_FALL,
                    f"PSEL deasserted ({previous.select} -> 0) without a completed "
                    f"access (previous PENABLE={previous.enable}, "
                    f"PREADY={previous.ready})",
                    "psel",
                )
            )

        return violations
