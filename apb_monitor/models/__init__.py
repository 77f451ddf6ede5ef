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

"""Data model of the APB monitor: sampled values, samples, phases, history."""

from .bus_sample import BusSample
from .history import HistoryWindow
from .phase import (
    LEGAL_TRANSITIONS,
    Phase,
    PhaseClassifier,
    classify_phase,
    is_legal_transition,
)
from .tristate import (
    UNKNOWN,
    Known,
    TriState,
    Unknown,
    decode_bit,
    decode_bits,
    is_false,
    is_known,
    is_true,
)
from .violation import Violation, ViolationKind

__all__ = [
    "BusSample",
    "HistoryWindow",
    "LEGAL_TRANSITIONS",
    "Phase",
    "PhaseClassifier",
    "classify_phase",
    "is_legal_transition",
    "UNKNOWN",
    "Known",
    "TriState",
    "Unknown",
    "decode_bit",
    "decode_bits",
    "is_false",
    "is_known",
    "is_true",
    "Violation",
    "ViolationKind",
]
