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

"""Central configuration for the APB protocol monitor.

Configuration
=============

This module contains the configuration constants and the construction-time
configuration objects used throughout the monitor. Everything here is fixed
when a monitor is built; nothing changes per tick.

Organization:
    - Bus Width Configuration (address, data, protection widths)
    - Monitored Signal Table (BusSample field to APB signal name)
    - Stability Rule Configuration
    - MonitorConfig (validated widths and rule options)
    - ApbSignalNames (DUT / trace signal naming)

Usage:
    >>> from apb_monitor.config import MonitorConfig
    >>> config = MonitorConfig(addr_width=16, data_width=32)
    >>> config.strobe_width
    4

    A data width that is not a whole number of bytes is rejected:
    >>> MonitorConfig(data_width=12)
    Traceback (most recent call last):
        ...
    apb_monitor.exceptions.ConfigurationError: data_width (12) must be a multiple of 8

Customization:
    To monitor a bus whose signals use different names, create an
    ApbSignalNames instance:
    >>> names = ApbSignalNames(prefix="s_apb_", psel="s_apb_psel_0")
"""

from dataclasses import dataclass, field
from typing import Final

from .exceptions import ConfigurationError

# ============================================================================
# Bus Width Configuration
# ============================================================================

DEFAULT_ADDR_WIDTH: Final[int] = 32
"""Default width of PADDR in bits."""

DEFAULT_DATA_WIDTH: Final[int] = 32
"""Default width of PWDATA / PRDATA in bits."""

BITS_PER_STROBE_LANE: Final[int] = 8
"""Each PSTRB bit qualifies one byte lane of PWDATA."""

PROT_WIDTH: Final[int] = 3
"""Width of PPROT in bits (privileged, non-secure, instruction)."""

# ============================================================================
# Monitored Signal Table
# ============================================================================

BUS_SIGNALS: Final[tuple[tuple[str, str], ...]] = (
    ("reset_n", "presetn"),
    ("addr", "paddr"),
    ("protection", "pprot"),
    ("select", "psel"),
    ("enable", "penable"),
    ("write", "pwrite"),
    ("wdata", "pwdata"),
    ("strobe", "pstrb"),
    ("ready", "pready"),
    ("rdata", "prdata"),
    ("slave_error", "pslverr"),
)
"""(BusSample field, APB signal) pairs for every monitored signal, in order."""

SIGNAL_FOR_FIELD: Final[dict[str, str]] = dict(BUS_SIGNALS)
"""Lookup from BusSample field name to lowercase APB signal name."""

FIELD_FOR_SIGNAL: Final[dict[str, str]] = {sig: fld for fld, sig in BUS_SIGNALS}
"""Lookup from lowercase APB signal name to BusSample field name."""

SINGLE_BIT_SIGNALS: Final[frozenset[str]] = frozenset(
    {"presetn", "psel", "penable", "pwrite", "pready", "pslverr"}
)
"""APB signals sampled as one-bit booleans."""


def display_name(signal: str) -> str:
    """Return the conventional spelling of a lowercase APB signal name."""
    return "PRESETn" if signal == "presetn" else signal.upper()


# ============================================================================
# Stability Rule Configuration
# ============================================================================

DEFAULT_STABLE_SIGNALS: Final[tuple[str, ...]] = ("paddr", "pprot", "pstrb", "pslverr")
"""Signals that may only change on an Idle or Setup tick."""


# ============================================================================
# Monitor Configuration
# ============================================================================


@dataclass(frozen=True)
class MonitorConfig:
    """Construction-time parameters of an APB monitor.

    Basic Parameters:
        addr_width: Width of PADDR in bits
        data_width: Width of PWDATA/PRDATA in bits; PSTRB is data_width / 8

    Rule Options:
        stable_signals: APB signals checked by the generic stability rule.
            PWDATA, PSEL and PENABLE have dedicated rules and are rejected here.

        report_redundant_transitions: Report an illegal phase transition even
            when the same tick already reported an illegal PSEL/PENABLE fall
            - When False: a Setup -> Idle jump yields one violation (psel_fall)
            - When True: it yields both psel_fall and phase_transition

    Raises:
        ConfigurationError: If any parameter is invalid.
    """

    addr_width: int = DEFAULT_ADDR_WIDTH
    data_width: int = DEFAULT_DATA_WIDTH
    stable_signals: tuple[str, ...] = DEFAULT_STABLE_SIGNALS
    report_redundant_transitions: bool = False

    def __post_init__(self) -> None:
        """Validate widths and rule options."""
        if self.addr_width <= 0:
            raise ConfigurationError(
                f"addr_width ({self.addr_width}) must be positive", "addr_width"
            )
        if self.data_width <= 0:
            raise ConfigurationError(
                f"data_width ({self.data_width}) must be positive", "data_width"
            )
        if self.data_width % BITS_PER_STROBE_LANE:
            raise ConfigurationError(
                f"data_width ({self.data_width}) must be a multiple of "
                f"{BITS_PER_STROBE_LANE}",
                "data_width",
            )

        # Accept a list for convenience, but keep the frozen instance hashable
        object.__setattr__(self, "stable_signals", tuple(self.stable_signals))
        for signal in self.stable_signals:
            if signal not in FIELD_FOR_SIGNAL:
                raise ConfigurationError(
                    f"Unknown signal in stable_signals: {signal!r}", "stable_signals"
                )
            if signal in ("pwdata", "psel", "penable", "presetn"):
                raise ConfigurationError(
                    f"{signal} has a dedicated rule and cannot be in stable_signals",
                    "stable_signals",
                )

    @property
    def strobe_width(self) -> int:
        """Width of PSTRB in bits (one bit per data byte lane)."""
        return self.data_width // BITS_PER_STROBE_LANE

    def width_of(self, signal: str) -> int:
        """Return the configured bit width of an APB signal."""
        if signal in SINGLE_BIT_SIGNALS:
            return 1
        return {
            "paddr": self.addr_width,
            "pprot": PROT_WIDTH,
            "pwdata": self.data_width,
            "prdata": self.data_width,
            "pstrb": self.strobe_width,
        }[signal]


# ============================================================================
# DUT / Trace Signal Naming
# ============================================================================


@dataclass
class ApbSignalNames:
    """Configurable names of the APB signals on a DUT or in a trace.

    This allows the monitor to attach to buses with different naming
    conventions without changing monitor code. Any field left as None is
    derived as prefix + the conventional upper-case APB name (PRESETn keeps
    its mixed case).

    Example:
        >>> names = ApbSignalNames(prefix="m_")
        >>> names.name_for("psel")
        'm_PSEL'
        >>> ApbSignalNames(psel="sel_i").name_for("psel")
        'sel_i'
    """

    prefix: str = ""
    """Prefix prepended to derived names."""

    lowercase: bool = False
    """Derive lower-case names (e.g. 'psel') instead of 'PSEL'."""

    presetn: str | None = None
    paddr: str | None = None
    pprot: str | None = None
    psel: str | None = None
    penable: str | None = None
    pwrite: str | None = None
    pwdata: str | None = None
    pstrb: str | None = None
    pready: str | None = None
    prdata: str | None = None
    pslverr: str | None = None

    overrides: dict[str, str] = field(default_factory=dict, repr=False)
    """Extra name overrides keyed by lowercase APB signal name."""

    def name_for(self, signal: str) -> str:
        """Return the DUT/trace name of an APB signal."""
        if signal not in FIELD_FOR_SIGNAL:
            raise ConfigurationError(f"Unknown APB signal: {signal!r}", "signal")
        explicit = self.overrides.get(signal) or getattr(self, signal)
        if explicit:
            return explicit
        if self.lowercase:
            return self.prefix + signal
        return self.prefix + display_name(signal)

    def mapping(self) -> dict[str, str]:
        """Return {BusSample field: DUT/trace name} for every monitored signal."""
        return {fld: self.name_for(sig) for fld, sig in BUS_SIGNALS}
