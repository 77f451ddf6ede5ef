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

"""One clock tick's snapshot of the APB bus.

Field order mirrors the APB signal list: PRESETn first, then the requester
driven signals, then the completer driven signals. Defaults describe an idle
bus out of reset, so callers only spell out the signals they care about.
"""

from collections.abc import Iterator
from dataclasses import dataclass, fields
from typing import Any

from ..config import BUS_SIGNALS, FIELD_FOR_SIGNAL
from .tristate import UNKNOWN, Known, TriState, is_false


@dataclass(frozen=True)
class BusSample:
    """Immutable sample of every APB signal at one rising clock edge."""

    reset_n: TriState[bool] = Known(True)
    addr: TriState[int] = Known(0)
    protection: TriState[int] = Known(0)
    select: TriState[bool] = Known(False)
    enable: TriState[bool] = Known(False)
    write: TriState[bool] = Known(False)
    wdata: TriState[int] = Known(0)
    strobe: TriState[int] = Known(0)
    ready: TriState[bool] = Known(False)
    rdata: TriState[int] = Known(0)
    slave_error: TriState[bool] = Known(False)

    @property
    def reset_asserted(self) -> bool:
        """True when PRESETn is sampled low; all checks are suspended."""
        return is_false(self.reset_n)

    def signal(self, name: str) -> TriState[Any]:
        """Return a field by its lowercase APB signal name (e.g. 'paddr')."""
        return getattr(self, FIELD_FOR_SIGNAL[name])

    def signals(self) -> Iterator[tuple[str, TriState[Any]]]:
        """Yield (APB signal name, value) for every monitored signal."""
        for fld, sig in BUS_SIGNALS:
            yield sig, getattr(self, fld)

    @classmethod
    def build(cls, **values: Any) -> "BusSample":
        """Build a sample from plain Python values.

        Keyword names are BusSample field names. Plain ints/bools become Known
        values, None becomes Unknown, and TriState values pass through. One-bit
        fields are normalized to bool.

        Example:
            >>> BusSample.build(select=1, enable=0, addr=0x40, wdata=None)
        """
        single_bit = {"reset_n", "select", "enable", "write", "ready", "slave_error"}
        valid_fields = {f.name for f in fields(cls)}
        converted: dict[str, TriState[Any]] = {}
        for name, value in values.items():
            if name not in valid_fields:
                raise TypeError(f"BusSample has no field {name!r}")
            if value is None:
                converted[name] = UNKNOWN
            elif isinstance(value, (Known, type(UNKNOWN))):
                converted[name] = value
            elif name in single_bit:
                converted[name] = Known(bool(value))
            else:
                converted[name] = Known(int(value))
        return cls(**converted)

    def describe(self) -> str:
        """Compact one-line rendering for log messages."""
        return " ".join(f"{sig}={value}" for sig, value in self.signals())
