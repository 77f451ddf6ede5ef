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


"""Tests for replaying VCD traces."""

from pathlib import Path

import pytest

from apb_monitor import (
    UNKNOWN,
    ApbProtocolMonitor,
    ApbSignalNames,
    ConfigurationError,
    Known,
    MonitorConfig,
    TraceFormatError,
    VcdTraceReader,
)

from bus_builders import idle, read_transfer, rules, setup_phase, to_vcd, write_transfer

pytestmark = pytest.mark.trace

HEADER = """\
$date today $end
$version hand written $end
$timescale 10ps $end
$scope module tb $end
$var wire 1 ! PCLK $end
$var wire 1 " PRESETn $end
$var wire 8 # PADDR [7:0] $end
$var wire 3 $ PPROT $end
$var wire 1 % PSEL $end
$var wire 1 & PENABLE $end
$var wire 1 ' PWRITE $end
$var wire 8 ( PWDATA $end
$var wire 1 ) PSTRB $end
$var wire 1 * PREADY $end
$var wire 8 + PRDATA $end
$var wire 1 , PSLVERR $end
$upscope $end
$enddefinitions $end
"""

INITIAL = """\
#0
$dumpvars
0!
1"
b0 #
b0 $
0%
0&
0'
b0 (
0)
0*
b0 +
0,
$end
"""

SMALL_BUS = MonitorConfig(addr_width=8, data_width=8)


def reader_for(text: str, **kwargs) -> VcdTraceReader:
    return VcdTraceReader(text.splitlines(), **kwargs)


class TestSampling:
    def test_one_sample_per_rising_edge(self) -> None:
        samples = [idle(), *write_transfer(), idle()]
        reader = VcdTraceReader(to_vcd(samples))
        assert [time for time, _ in reader.edges()] == [5, 15, 25, 35]
        assert list(reader) == samples

    def test_samples_values_before_the_edge(self) -> None:
        trace = HEADER + INITIAL + "b1 #\n#5\n1!\nb10 #\n#10\n0!\n#15\n1!\n"
        addrs = [sample.addr for sample in reader_for(trace)]
        assert addrs == [Known(1), Known(2)]

    def test_falling_edge_and_steady_clock_are_not_sampled(self) -> None:
        trace = HEADER + INITIAL + "#5\n1!\n#7\n1!\n#10\n0!\n#12\nb11 #\n"
        assert len(list(reader_for(trace))) == 1

    def test_unknown_values(self) -> None:
        trace = HEADER + INITIAL + "bx #\nz%\n#5\n1!\n"
        (sample,) = reader_for(trace)
        assert sample.addr == UNKNOWN
        assert sample.select == UNKNOWN
        assert sample.reset_n == Known(True)

    def test_signals_never_assigned_are_unknown(self) -> None:
        trace = HEADER + "#0\n0!\n#5\n1!\n"
        (sample,) = reader_for(trace)
        assert sample.addr == UNKNOWN
        assert sample.reset_n == UNKNOWN

    def test_real_and_string_values_are_ignored(self) -> None:
        trace = HEADER + INITIAL + "r1.5 #\ns0 #\n#5\n1!\n"
        (sample,) = reader_for(trace)
        assert sample.addr == Known(0)

    def test_timescale(self) -> None:
        reader = reader_for(HEADER + INITIAL)
        list(reader)
        assert reader.timescale == "10ps"

    def test_reads_a_file(self, tmp_path: Path) -> None:
        path = tmp_path / "dump.vcd"
        path.write_text("\n".join(to_vcd([idle(), idle()])) + "\n")
        assert len(list(VcdTraceReader(path))) == 2
        assert len(list(VcdTraceReader(str(path)))) == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            list(VcdTraceReader(tmp_path / "missing.vcd"))


class TestSignalLookup:
    def test_scope(self) -> None:
        lines = to_vcd([idle()], scope="tb.u_dut")
        assert len(list(VcdTraceReader(lines, scope="tb.u_dut"))) == 1
        with pytest.raises(TraceFormatError, match="in scope 'tb'"):
            list(VcdTraceReader(lines, scope="tb"))

    def test_shallowest_match_wins(self) -> None:
        nested = HEADER.replace(
            "$upscope $end\n",
            "$scope module u_dut $end\n$var wire 8 - PADDR $end\n$upscope $end\n"
            "$upscope $end\n",
        )
        trace = nested + INITIAL + "b101 -\n#5\n1!\n"
        (sample,) = reader_for(trace)
        assert sample.addr == Known(0)

    def test_prefixed_lowercase_names(self) -> None:
        names = ApbSignalNames(prefix="s_apb_", lowercase=True)
        lines = to_vcd([idle(), setup_phase()], clock="s_apb_pclk", names=names)
        reader = VcdTraceReader(lines, clock="s_apb_pclk", names=names)
        assert len(list(reader)) == 2

    def test_missing_signals_listed(self) -> None:
        trace = HEADER.replace("$var wire 1 , PSLVERR $end\n", "")
        with pytest.raises(TraceFormatError) as excinfo:
            list(reader_for(trace + INITIAL))
        assert excinfo.value.missing_signals == ["PSLVERR"]
        assert "PSLVERR" in str(excinfo.value)

    def test_missing_clock(self) -> None:
        with pytest.raises(TraceFormatError) as excinfo:
            list(reader_for(HEADER + INITIAL, clock="HCLK"))
        assert excinfo.value.missing_signals == ["HCLK"]

    def test_width_checked_against_config(self) -> None:
        list(reader_for(HEADER + INITIAL, config=SMALL_BUS))
        with pytest.raises(ConfigurationError, match="PADDR"):
            list(reader_for(HEADER + INITIAL, config=MonitorConfig()))

    def test_clock_must_be_one_bit(self) -> None:
        trace = HEADER.replace("$var wire 1 ! PCLK", "$var wire 2 ! PCLK")
        with pytest.raises(ConfigurationError):
            list(reader_for(trace + INITIAL))


class TestMalformedTrace:
    @pytest.mark.parametrize(
        "trace,message",
        [
            ("$scope module tb $end\n", "no \\$enddefinitions"),
            ("$var wire 1 ! PCLK\n", "Unterminated \\$var"),
            ("$var wire 1 ! $end\n$enddefinitions $end\n", "Malformed \\$var"),
            ("$var wire one ! PCLK $end\n", "Invalid \\$var width"),
            ("$upscope $end\n", "\\$upscope without \\$scope"),
            ("module tb\n", "Unexpected token"),
        ],
    )
    def test_bad_header(self, trace: str, message: str) -> None:
        with pytest.raises(TraceFormatError, match=message):
            list(reader_for(trace))

    def test_timestamp_going_backwards(self) -> None:
        trace = HEADER + INITIAL + "#20\n1!\n#10\n0!\n"
        with pytest.raises(TraceFormatError, match="goes backwards") as excinfo:
            list(reader_for(trace))
        assert excinfo.value.line_number == trace.splitlines().index("#10") + 1

    def test_unrecognized_value_change(self) -> None:
        with pytest.raises(TraceFormatError, match="Unrecognized"):
            list(reader_for(HEADER + INITIAL + "q!\n"))

    def test_vector_without_identifier(self) -> None:
        with pytest.raises(TraceFormatError, match="no identifier"):
            list(reader_for(HEADER + INITIAL + "b0101\n"))

    def test_vector_without_bits(self) -> None:
        with pytest.raises(TraceFormatError, match="has no bits") as excinfo:
            list(reader_for(HEADER + INITIAL + "#5\n1!\nb #\n#10\n0!\n"))
        assert excinfo.value.line_number == len((HEADER + INITIAL).splitlines()) + 3


class TestReplay:
    def test_clean_trace(self) -> None:
        samples = [idle(), *write_transfer(waits=2), *read_transfer(), idle()]
        monitor = ApbProtocolMonitor()
        assert monitor.run(VcdTraceReader(to_vcd(samples))) == []
        assert monitor.tick == len(samples)

    def test_violation_found_in_trace(self) -> None:
        samples = [idle(), setup_phase(), idle()]
        violations = ApbProtocolMonitor().run(VcdTraceReader(to_vcd(samples)))
        assert rules(violations) == ["psel_fall"]
        assert violations[0].tick == 2
