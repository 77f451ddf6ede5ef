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

"""cocotb bus monitor that feeds a live simulation into the protocol monitor.

How It Works:
    ApbBusMonitor runs as a background coroutine alongside the test. On every
    rising edge of the bus clock it waits for ReadOnly (all signal updates of
    the time step have settled), reads every APB signal, decodes X/Z to
    Unknown and hands the sample to an ApbProtocolMonitor.

Usage:
    monitor = ApbBusMonitor(dut, dut.PCLK, MonitorConfig(addr_width=12))
    cocotb.start_soon(monitor.run())

    # ... drive the bus ...

    monitor.check_complete()  # AssertionError if any violation was seen

Signal handles are resolved once at construction; a missing handle or one
whose width does not match the configuration raises ConfigurationError
before the first tick.
"""

import logging
from collections.abc import Sequence
from typing import Any

from cocotb.triggers import ReadOnly, RisingEdge

from ..config import (
    BUS_SIGNALS,
    SINGLE_BIT_SIGNALS,
    ApbSignalNames,
    MonitorConfig,
    display_name,
)
from ..exceptions import ConfigurationError
from ..models.bus_sample import BusSample
from ..models.tristate import decode_bit, decode_bits
from ..models.violation import Violation
from ..reporters import CollectingReporter, LoggingReporter, ViolationReporter
from .protocol_monitor import ApbProtocolMonitor


def resolve_handle(dut: Any, path: str) -> Any:
    """Walk a dot-separated hierarchy path from the DUT handle."""
    obj = dut
    for attr in path.split("."):
        obj = getattr(obj, attr)
    return obj


class ApbBusMonitor:
    """Samples an APB interface of a running simulation every clock edge."""

    def __init__(
        self,
        dut: Any,
        clock: Any | None = None,
        config: MonitorConfig | None = None,
        names: ApbSignalNames | None = None,
        reporters: Sequence[ViolationReporter] = (),
        name: str = "apb_monitor",
    ) -> None:
        """Initialize bus monitor and resolve signal handles.

        Args:
            dut: Device under test (cocotb SimHandle)
            clock: Clock handle (default: dut.PCLK, with the names' prefix)
            config: Bus widths and rule options
            names: Signal naming on the DUT
            reporters: Extra reporters; violations are always collected and
                logged as well
            name: Monitor name, used for the logger and error messages

        Raises:
            ConfigurationError: If a signal is missing or has the wrong width.
        """
        self.dut = dut
        self.name = name
        self.config = config or MonitorConfig()
        self.names = names or ApbSignalNames()
        self.log = logging.getLogger(f"cocotb.{name}")
        self.clock = clock if clock is not None else self._resolve(
            self.names.prefix + ("pclk" if self.names.lowercase else "PCLK")
        )

        self._handles: dict[str, Any] = {}
        for fld, signal in BUS_SIGNALS:
            handle = self._resolve(self.names.name_for(signal))
            self._check_width(signal, handle)
            self._handles[fld] = handle

        self.collector = CollectingReporter()
        self.core = ApbProtocolMonitor(
            self.config,
            [self.collector, LoggingReporter(self.log), *reporters],
        )
        self.cycles = 0

    def _resolve(self, path: str) -> Any:
        try:
            return resolve_handle(self.dut, path)
        except AttributeError as e:
            raise ConfigurationError(
                f"{self.name}: DUT has no signal {path!r}", "names"
            ) from e

    def _check_width(self, signal: str, handle: Any) -> None:
        expected = self.config.width_of(signal)
        actual = len(handle)
        if actual != expected:
            raise ConfigurationError(
                f"{self.name}: {display_name(signal)} is {actual} bits wide, "
                f"configuration expects {expected}",
                signal,
            )

    def sample(self) -> BusSample:
        """Read every APB signal of the current time step."""
        values = {}
        for fld, signal in BUS_SIGNALS:
            text = str(self._handles[fld].value)
            if signal in SINGLE_BIT_SIGNALS:
                values[fld] = decode_bit(text)
            else:
                values[fld] = decode_bits(text)
        return BusSample(**values)

    def step(self) -> list[Violation]:
        """Sample the bus once and run the protocol checks."""
        self.cycles += 1
        return self.core.step(self.sample())

    async def run(self) -> None:
        """Run the monitor loop until the test ends."""
        self.log.info("%s started", self.name)
        while True:
            await RisingEdge(self.clock)
            await ReadOnly()
            self.step()

    @property
    def violations(self) -> list[Violation]:
        return self.collector.violations

    def check_complete(self) -> None:
        """Check that no protocol violation occurred.

        Raises AssertionError listing the violations otherwise.
        """
        self.log.info(
            "%s: %d cycles monitored, %d violations",
            self.name,
            self.cycles,
            self.collector.count(),
        )
        if self.collector.violations:
            raise AssertionError(
                f"{self.name}: {self.collector.count()} APB violations:\n"
                + "\n".join(str(v) for v in self.collector.violations)
            )


async def apb_monitor(
    dut: Any,
    clock: Any | None = None,
    config: MonitorConfig | None = None,
    names: ApbSignalNames | None = None,
) -> None:
    """Coroutine wrapper for ApbBusMonitor.

    For tests that only need violations logged, not inspected:
        cocotb.start_soon(apb_monitor(dut, dut.PCLK))
    """
    monitor = ApbBusMonitor(dut, clock, config, names)
    await monitor.run()
