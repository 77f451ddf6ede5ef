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

"""Protocol violation records."""

from dataclasses import dataclass
from enum import Enum, auto


class ViolationKind(Enum):
    """Categories of APB protocol violations."""

    UNKNOWN_SIGNAL = auto()
    STABILITY = auto()
    WRITE_DATA_STABILITY = auto()
    STROBE_NONZERO_ON_READ = auto()
    ILLEGAL_ENABLE_FALL = auto()
    ILLEGAL_SELECT_FALL = auto()
    ILLEGAL_PHASE_TRANSITION = auto()


@dataclass(frozen=True)
class Violation:
    """A single protocol violation observed at one tick.

    Attributes:
        tick: Zero-based index of the sample that exposed the violation
        rule_name: Stable rule identifier (e.g. "paddr_never_unknown")
        message: Human-readable description
        kind: Violation category
        signal: Offending APB signal, if the rule concerns one signal
    """

    tick: int
    rule_name: str
    message: str
    kind: ViolationKind
    signal: str | None = None

    def __str__(self) -> str:
        return f"tick {self.tick}: [{self.rule_name}] {self.message}"
