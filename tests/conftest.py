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


"""Pytest configuration for tests."""

from typing import Any

import pytest

from apb_monitor import ApbProtocolMonitor, CollectingReporter, MonitorConfig


def pytest_configure(config: Any) -> None:
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "cocotb: mark test as needing cocotb")
    config.addinivalue_line("markers", "trace: mark test as a VCD trace replay test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture
def collector() -> CollectingReporter:
    """Reporter that keeps every violation."""
    return CollectingReporter()


@pytest.fixture
def monitor(collector: CollectingReporter) -> ApbProtocolMonitor:
    """Monitor with default 32-bit widths reporting into the collector."""
    return ApbProtocolMonitor(MonitorConfig(), [collector])
