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

"""Custom exceptions for monitor setup and trace input errors.

Exceptions
==========

Protocol violations are never raised: they are reported as Violation records
and monitoring continues. The exceptions below cover the cases where the
monitor cannot be built or its input cannot be read at all.
"""


class ApbMonitorError(Exception):
    """Base exception for all monitor-related failures.

    All monitor-specific exceptions inherit from this base class,
    allowing callers to catch them with a single handler.
    """

    pass


class ConfigurationError(ApbMonitorError):
    """Invalid monitor configuration.

    Raised at construction time, before the first tick is processed, when
    bus widths are inconsistent (e.g. a data width that is not a whole number
    of bytes) or when DUT signal handles do not match the configured widths.
    """

    def __init__(self, message: str, parameter: str | None = None):
        """Initialize configuration error with context.

        Args:
            message: Error description
            parameter: Name of the offending configuration parameter
        """
        super().__init__(message)
        self.parameter = parameter


class TraceFormatError(ApbMonitorError):
    """Malformed or incomplete recorded trace.

    Raised by trace readers when the input cannot be parsed, or when a
    signal the monitor needs is not present in the trace.
    """

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        missing_signals: list[str] | None = None,
    ):
        """Initialize trace format error with location details.

        Args:
            message: Error description
            line_number: 1-based line number of the offending input line
            missing_signals: Signal names required but not found in the trace
        """
        super().__init__(message)
        self.line_number = line_number
        self.missing_signals = missing_signals or []
