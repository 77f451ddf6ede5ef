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

"""Replay a recorded VCD waveform as a stream of bus samples.

VCD Trace Reader
================

Reads a Value Change Dump (IEEE 1364 section 18) and yields one BusSample per
rising edge of the bus clock. Each sample holds the values the signals had
immediately before the edge, i.e. the values a flop clocked by that edge
would capture. Changes recorded at the same timestamp as the edge belong to
the next sample.

Signal lookup:
    Signals are matched by name (see ApbSignalNames). With scope="tb.u_apb"
    only "tb.u_apb.<name>" matches; without a scope, the shallowest variable
    with a matching leaf name wins.

Usage:
    reader = VcdTraceReader("dump.vcd", clock="PCLK", scope="tb")
    monitor.run(reader)

    for time, sample in reader.edges():
        ...
"""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from ..config import (
    BUS_SIGNALS,
    SINGLE_BIT_SIGNALS,
    ApbSignalNames,
    MonitorConfig,
    display_name,
)
from ..exceptions import ConfigurationError, TraceFormatError
from ..models.bus_sample import BusSample
from ..models.tristate import decode_bit, decode_bits

SCALAR_RE = re.compile(r"^([01xXzZuUwWlLhH-])(\S+)$")
TIMESTAMP_RE = re.compile(r"^#(\d+)$")

# Header sections skipped up to their $end
SKIPPED_SECTIONS = frozenset({"$date", "$version", "$timescale", "$comment"})

# Value-section keywords that carry no value changes themselves
DUMP_KEYWORDS = frozenset({"$dumpvars", "$dumpall", "$dumpon", "$dumpoff", "$end"})

CLOCK_FIELD = "clock"


@dataclass(frozen=True)
class VcdVariable:
    """A $var declaration."""

    identifier: str
    width: int
    path: str

    @property
    def leaf(self) -> str:
        return self.path.rsplit(".", 1)[-1]

    @property
    def depth(self) -> int:
        return self.path.count(".")


def _tokens(lines: Iterable[str]) -> Iterator[tuple[int, str]]:
    for line_number, line in enumerate(lines, start=1):
        for token in line.split():
            yield line_number, token


class VcdTraceReader:
    """Iterable source of BusSamples recorded in a VCD file."""

    def __init__(
        self,
        source: str | Path | Iterable[str],
        clock: str = "PCLK",
        names: ApbSignalNames | None = None,
        scope: str | None = None,
        config: MonitorConfig | None = None,
    ) -> None:
        """Initialize reader.

        Args:
            source: Path of a .vcd file, or an iterable of its lines
            clock: Name of the bus clock signal
            names: Signal naming in the trace
            scope: Dot-separated scope containing the bus signals
            config: If given, declared widths are checked against it
        """
        self.source = source
        self.clock = clock
        self.names = names or ApbSignalNames()
        self.scope = scope
        self.config = config
        self.timescale: str | None = None
        self.variables: list[VcdVariable] = []

    def _lines(self) -> Iterator[str]:
        if isinstance(self.source, (str, Path)):
            path = Path(self.source)
            if not path.exists():
                raise FileNotFoundError(f"VCD file not found: {path}")
            with path.open() as f:
                yield from f
        else:
            yield from self.source

    def _parse_header(self, tokens: Iterator[tuple[int, str]]) -> None:
        scopes: list[str] = []
        for line_number, token in tokens:
            if token == "$enddefinitions":
                self._skip_to_end(tokens, token, line_number)
                return
            if token == "$scope":
                body = self._skip_to_end(tokens, token, line_number)
                if len(body) < 2:
                    raise TraceFormatError("Malformed $scope", line_number)
                scopes.append(body[1])
            elif token == "$upscope":
                self._skip_to_end(tokens, token, line_number)
                if not scopes:
                    raise TraceFormatError("$upscope without $scope", line_number)
                scopes.pop()
            elif token == "$var":
                body = self._skip_to_end(tokens, token, line_number)
                if len(body) < 4:
                    raise TraceFormatError("Malformed $var", line_number)
                _kind, width, identifier, name = body[:4]
                try:
                    bits = int(width)
                except ValueError as e:
                    raise TraceFormatError(
                        f"Invalid $var width {width!r}", line_number
                    ) from e
                if bits > 1 and "[" in name:
                    name = name.split("[", 1)[0]
                self.variables.append(
                    VcdVariable(identifier, bits, ".".join([*scopes, name]))
                )
            elif token == "$timescale":
                self.timescale = " ".join(
                    self._skip_to_end(tokens, token, line_number)
                )
            elif token in SKIPPED_SECTIONS:
                self._skip_to_end(tokens, token, line_number)
            else:
                raise TraceFormatError(
                    f"Unexpected token {token!r} in VCD header", line_number
                )
        raise TraceFormatError("VCD header has no $enddefinitions")

    @staticmethod
    def _skip_to_end(
        tokens: Iterator[tuple[int, str]], keyword: str, line_number: int
    ) -> list[str]:
        body = []
        for _, token in tokens:
            if token == "$end":
                return body
            body.append(token)
        raise TraceFormatError(f"Unterminated {keyword}", line_number)

    def _find(self, name: str) -> VcdVariable | None:
        if self.scope:
            wanted = f"{self.scope}.{name}"
            return next((v for v in self.variables if v.path == wanted), None)
        matches = [v for v in self.variables if v.leaf == name]
        return min(matches, key=lambda v: v.depth) if matches else None

    def _bind_signals(self) -> dict[str, list[str]]:
        """Map VCD identifier -> fields it drives; checks presence and width."""
        wanted = {fld: self.names.name_for(sig) for fld, sig in BUS_SIGNALS}
        wanted[CLOCK_FIELD] = self.clock

        by_identifier: dict[str, list[str]] = {}
        missing = []
        for fld, name in wanted.items():
            variable = self._find(name)
            if variable is None:
                missing.append(name)
                continue
            self._check_width(fld, variable)
            by_identifier.setdefault(variable.identifier, []).append(fld)

        if missing:
            where = f" in scope {self.scope!r}" if self.scope else ""
            raise TraceFormatError(
                f"Signals not found in trace{where}: {', '.join(missing)}",
                missing_signals=missing,
            )
        return by_identifier

    def _check_width(self, fld: str, variable: VcdVariable) -> None:
        if fld == CLOCK_FIELD:
            expected = 1
        elif self.config is not None:
            expected = self.config.width_of(dict(BUS_SIGNALS)[fld])
        else:
            return
        if variable.width != expected:
            signal = display_name(dict(BUS_SIGNALS).get(fld, fld))
            raise ConfigurationError(
                f"{variable.path} ({signal}) is {variable.width} bits wide in the "
                f"trace, expected {expected}",
                fld,
            )

    def _to_sample(self, values: dict[str, str]) -> BusSample:
        decoded = {}
        for fld, signal in BUS_SIGNALS:
            text = values[fld]
            if signal in SINGLE_BIT_SIGNALS:
                decoded[fld] = decode_bit(text)
            else:
                decoded[fld] = decode_bits(text)
        return BusSample(**decoded)

    def edges(self) -> Iterator[tuple[int, BusSample]]:
        """Yield (timestamp, sample) for every rising clock edge.

        Raises:
            TraceFormatError: If the trace is malformed or lacks a signal.
        """
        tokens = _tokens(self._lines())
        self.variables = []
        self._parse_header(tokens)
        by_identifier = self._bind_signals()

        values = {fld: "x" for fld in [*dict(BUS_SIGNALS), CLOCK_FIELD]}
        pending: dict[str, str] = {}
        time = 0

        def flush() -> Iterator[tuple[int, BusSample]]:
            old_clock = values[CLOCK_FIELD]
            new_clock = pending.get(CLOCK_FIELD, old_clock)
            if old_clock == "0" and new_clock == "1":
                yield time, self._to_sample(values)
            values.update(pending)
            pending.clear()

        def record(identifier: str, text: str) -> None:
            for fld in by_identifier.get(identifier, ()):
                pending[fld] = text.lower()

        for line_number, token in tokens:
            stamp = TIMESTAMP_RE.match(token)
            if stamp:
                yield from flush()
                new_time = int(stamp.group(1))
                if new_time < time:
                    raise TraceFormatError(
                        f"Timestamp #{new_time} goes backwards from #{time}",
                        line_number,
                    )
                time = new_time
            elif token in DUMP_KEYWORDS:
                continue
            elif token in SKIPPED_SECTIONS:
                self._skip_to_end(tokens, token, line_number)
            elif token[0] in "bBrRsS":
                try:
                    _, identifier = next(tokens)
                except StopIteration:
                    raise TraceFormatError(
                        f"Value {token!r} has no identifier", line_number
                    ) from None
                if token[0] in "bB":
                    if len(token) == 1:
                        raise TraceFormatError(
                            f"Vector value for {identifier!r} has no bits",
                            line_number,
                        )
                    record(identifier, token[1:])
            else:
                scalar = SCALAR_RE.match(token)
                if not scalar:
                    raise TraceFormatError(
                        f"Unrecognized value change {token!r}", line_number
                    )
                record(scalar.group(2), scalar.group(1))
        yield from flush()

    def __iter__(self) -> Iterator[BusSample]:
        for _, sample in self.edges():
            yield sample
