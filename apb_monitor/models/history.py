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

"""One-tick lookback window over the sampled bus.

The window holds exactly two slots (current and previous) and never grows.
A sample taken while reset is asserted is never promoted to `previous`, so
on the first tick after reset deassertion `previous` is None and every
lookback-based check is skipped for that tick.
"""

from .bus_sample import BusSample
from .phase import Phase


class HistoryWindow:
    """Current and preceding sample plus their phases."""

    def __init__(self) -> None:
        """Create an empty window (monitor start)."""
        self.current: BusSample | None = None
        self.current_phase: Phase | None = None
        self.previous: BusSample | None = None
        self.previous_phase: Phase | None = None

    def push(self, sample: BusSample, phase: Phase | None) -> None:
        """Shift the window by one tick."""
        if self.current is not None and not self.current.reset_asserted:
            self.previous = self.current
            self.previous_phase = self.current_phase
        else:
            self.previous = None
            self.previous_phase = None
        self.current = sample
        self.current_phase = phase

    def clear(self) -> None:
        """Drop all history (as at monitor start)."""
        self.current = None
        self.current_phase = None
        self.previous = None
        self.previous_phase = None

    @property
    def has_lookback(self) -> bool:
        """True when the previous tick was sampled outside reset."""
        return self.previous is not None

    def __repr__(self) -> str:
        return (
            f"HistoryWindow(previous_phase={self.previous_phase}, "
            f"current_phase={self.current_phase}, "
            f"has_lookback={self.has_lookback})"
        )
