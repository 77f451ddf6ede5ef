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


"""APB protocol-compliance monitor.

This package contains a passive checker for the AMBA APB protocol: it
observes the bus once per clock tick and reports every violation of the
signal-validity, signal-stability and phase-transition rules. Samples come
from a live cocotb simulation (ApbBusMonitor) or from a recorded VCD trace
(VcdTraceReader); violations go to pluggable reporters.
"""

from ._version import __version__
from .config import ApbSignalNames, MonitorConfig
from .exceptions import ApbMonitorError, ConfigurationError, TraceFormatError
from .models import (
    UNKNOWN,
    BusSample,
    HistoryWindow,
    Known,
    Phase,
    PhaseClassifier,
    TriState,
    Unknown,
    Violation,
    ViolationKind,
    classify_phase,
)
from .monitors import ApbProtocolMonitor
from .reporters import CollectingReporter, LoggingReporter, ViolationReporter
from .sources import VcdTraceReader

__all__ = [
    "__version__",
    "ApbSignalNames",
    "MonitorConfig",
    "ApbMonitorError",
    "ConfigurationError",
    "TraceFormatError",
    "UNKNOWN",
    "BusSample",
    "HistoryWindow",
    "Known",
    "Phase",
    "PhaseClassifier",
    "TriState",
    "Unknown",
    "Violation",
    "ViolationKind",
    "classify_phase",
    "ApbProtocolMonitor",
    "CollectingReporter",
    "LoggingReporter",
    "ViolationReporter",
    "VcdTraceReader",
]
