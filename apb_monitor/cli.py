#!/usr/bin/env python3

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

"""Check a recorded VCD waveform for APB protocol violations."""

import argparse
import logging
import sys

from .config import (
    DEFAULT_ADDR_WIDTH,
    DEFAULT_DATA_WIDTH,
    ApbSignalNames,
    MonitorConfig,
)
from .exceptions import ApbMonitorError
from .monitors.protocol_monitor import ApbProtocolMonitor
from .reporters import CollectingReporter
from .sources.vcd_trace import VcdTraceReader

EXIT_CLEAN = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apb-monitor",
        description="Check a recorded VCD trace for APB protocol violations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s dump.vcd                        # Signals named PCLK, PSEL, ... anywhere
  %(prog)s dump.vcd --scope tb.u_dut       # Only signals directly in tb.u_dut
  %(prog)s dump.vcd --prefix s_apb_ --lowercase --clock s_apb_pclk
  %(prog)s dump.vcd --addr-width 12 --data-width 16

Exit status: 0 if no violations, 1 if violations were found,
2 if the trace or configuration is invalid.
""",
    )
    parser.add_argument("trace", help="VCD file to check")
    parser.add_argument(
        "--clock", default=None, help="Clock signal name (default: <prefix>PCLK)"
    )
    parser.add_argument(
        "--scope", default=None, help="Dot-separated scope of the APB signals"
    )
    parser.add_argument("--prefix", default="", help="Prefix of APB signal names")
    parser.add_argument(
        "--lowercase",
        action="store_true",
        help="Signal names are lower case (psel instead of PSEL)",
    )
    parser.add_argument(
        "--addr-width",
        type=int,
        default=DEFAULT_ADDR_WIDTH,
        help=f"PADDR width in bits (default: {DEFAULT_ADDR_WIDTH})",
    )
    parser.add_argument(
        "--data-width",
        type=int,
        default=DEFAULT_DATA_WIDTH,
        help=f"PWDATA/PRDATA width in bits (default: {DEFAULT_DATA_WIDTH})",
    )
    parser.add_argument(
        "--check-pwrite-stable",
        action="store_true",
        help="Also require PWRITE to hold for the whole transfer",
    )
    parser.add_argument(
        "--report-redundant",
        action="store_true",
        help="Report illegal phase transitions even when a PSEL/PENABLE "
        "violation on the same tick already explains them",
    )
    parser.add_argument(
        "--max-report",
        type=int,
        default=None,
        metavar="N",
        help="Print at most N violations (the summary always counts all)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log every tick (DEBUG)"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the trace checker; returns the process exit status."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    names = ApbSignalNames(prefix=args.prefix, lowercase=args.lowercase)
    clock = args.clock or names.prefix + ("pclk" if args.lowercase else "PCLK")

    try:
        stable = MonitorConfig().stable_signals
        if args.check_pwrite_stable:
            stable = (*stable, "pwrite")
        config = MonitorConfig(
            addr_width=args.addr_width,
            data_width=args.data_width,
            stable_signals=stable,
            report_redundant_transitions=args.report_redundant,
        )
        reader = VcdTraceReader(
            args.trace, clock=clock, names=names, scope=args.scope, config=config
        )
        collector = CollectingReporter()
        monitor = ApbProtocolMonitor(config, [collector])

        printed = 0
        for time, sample in reader.edges():
            for violation in monitor.step(sample):
                if args.max_report is None or printed < args.max_report:
                    print(f"@{time}: {violation}")
                    printed += 1
    except (ApbMonitorError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    timescale = f" ({reader.timescale})" if reader.timescale else ""
    print(f"\nChecked {monitor.tick} clock edges of {args.trace}{timescale}")
    print(collector.summary())
    return EXIT_VIOLATIONS if collector.violations else EXIT_CLEAN


if __name__ == "__main__":
    sys.exit(main())
