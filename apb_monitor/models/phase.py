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

"""APB transfer phases and the phase classifier.

Phase Model
===========

The protocol's operating state on a tick is derived from three signals of
that tick alone:

    PSEL  PENABLE  PREADY    Phase
    ----  -------  ------    ----------
     0       -       -       IDLE
     1       0       -       SETUP
     1       1       0       ACCESS_WAIT
     1       1       1       ACCESS_LAST

A transfer is one SETUP tick followed by zero or more ACCESS_WAIT ticks and
exactly one ACCESS_LAST tick. After ACCESS_LAST the bus either idles or
starts the next transfer's SETUP directly (back-to-back transfers).

If any of the three signals is unknown the phase is undefined (None) for
that tick, even where the table shows a "don't care" entry.
"""

from enum import Enum

from .bus_sample import BusSample
from .tristate import Known


class Phase(Enum):
    """Per-tick operating state of an APB interface."""

    IDLE = "Idle"
    SETUP = "Setup"
    ACCESS_WAIT = "AccessWait"
    ACCESS_LAST = "AccessLast"

    def __str__(self) -> str:
        return self.value

    @property
    def is_transfer_boundary(self) -> bool:
        """True for the phases in which address/control may legally change."""
        return self in (Phase.IDLE, Phase.SETUP)


LEGAL_TRANSITIONS: dict[Phase, frozenset[Phase]] = {
    Phase.IDLE: frozenset({Phase.IDLE, Phase.SETUP}),
    Phase.SETUP: frozenset({Phase.ACCESS_WAIT, Phase.ACCESS_LAST}),
    Phase.ACCESS_WAIT: frozenset({Phase.ACCESS_WAIT, Phase.ACCESS_LAST}),
    Phase.ACCESS_LAST: frozenset({Phase.IDLE, Phase.SETUP}),
}
"""Legal phase(t) -> phase(t+1) successors."""


def is_legal_transition(current: Phase, following: Phase) -> bool:
    """Return True if following may directly succeed current."""
    return following in LEGAL_TRANSITIONS[current]


class PhaseClassifier:
    """Derives the transfer phase of a single sample."""

    def classify(self, sample: BusSample) -> Phase | None:
        """Return the sample's phase, or None if it is undefined."""
        select, enable, ready = sample.select, sample.enable, sample.ready
        if not (
            isinstance(select, Known)
            and isinstance(enable, Known)
            and isinstance(ready, Known)
        ):
            return None
        if not select.value:
            return Phase.IDLE
        if not enable.value:
            return Phase.SETUP
        return Phase.ACCESS_LAST if ready.value else Phase.ACCESS_WAIT


def classify_phase(sample: BusSample) -> Phase | None:
    """Module-level convenience wrapper around PhaseClassifier."""
    return _CLASSIFIER.classify(sample)


_CLASSIFIER = PhaseClassifier()
